from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Upstream payloads. Only the fields we read are declared; extras are ignored.


class NominatimResult(BaseModel):
    lat: float = Field(allow_inf_nan=False)
    lon: float = Field(allow_inf_nan=False)
    display_name: str


class IssPosition(BaseModel):
    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)


class IssNowResponse(BaseModel):
    message: Optional[str] = None
    timestamp: int
    iss_position: IssPosition


class SpaceXLinks(BaseModel):
    webcast: Optional[str] = None


class SpaceXNextLaunch(BaseModel):
    name: str
    date_utc: str
    details: Optional[str] = None
    links: Optional[SpaceXLinks] = None


class NasaApod(BaseModel):
    date: str
    title: str
    media_type: str
    url: str
    explanation: Optional[str] = None


def _object_or_none(value: Any) -> Any:
    return value if isinstance(value, dict) else None


class MissDistance(BaseModel):
    # kept raw; unparseable values are handled by the summary
    kilometers: Any = None


class CloseApproach(BaseModel):
    close_approach_date: Any = None
    miss_distance: Optional[MissDistance] = None

    @field_validator("miss_distance", mode="before")
    @classmethod
    def drop_bad_miss_distance(cls, value: Any) -> Any:
        return _object_or_none(value)


class DiameterRange(BaseModel):
    estimated_diameter_min: Any = None
    estimated_diameter_max: Any = None


class EstimatedDiameter(BaseModel):
    meters: Optional[DiameterRange] = None

    @field_validator("meters", mode="before")
    @classmethod
    def drop_bad_meters(cls, value: Any) -> Any:
        return _object_or_none(value)


class NasaNeo(BaseModel):
    """One feed record. Everything here is optional: bad values fall back
    to the summary defaults instead of rejecting the feed."""

    name: Any = None
    # read for truthiness only
    is_potentially_hazardous_asteroid: Any = None
    estimated_diameter: Optional[EstimatedDiameter] = None
    close_approach_data: Optional[List[Optional[CloseApproach]]] = None

    @field_validator("estimated_diameter", mode="before")
    @classmethod
    def drop_bad_diameter(cls, value: Any) -> Any:
        return _object_or_none(value)

    @field_validator("close_approach_data", mode="before")
    @classmethod
    def drop_bad_approaches(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return None
        return [_object_or_none(item) for item in value]


class NasaNeoFeed(BaseModel):
    near_earth_objects: Optional[Dict[str, List[NasaNeo]]] = None

    @field_validator("near_earth_objects", mode="before")
    @classmethod
    def drop_bad_records(cls, value: Any) -> Any:
        # dates whose value is not a list are skipped, as are non-object records
        if not isinstance(value, dict):
            return None
        return {
            day: [record for record in records if isinstance(record, dict)]
            for day, records in value.items()
            if isinstance(records, list)
        }


class OpenMeteoPlace(BaseModel):
    name: str
    latitude: float = Field(allow_inf_nan=False)
    longitude: float = Field(allow_inf_nan=False)
    country: Optional[str] = None


class OpenMeteoGeocoding(BaseModel):
    results: List[OpenMeteoPlace] = []


class CurrentWeather(BaseModel):
    temperature: float
    windspeed: float
    weathercode: int
    time: Optional[str] = None


class OpenMeteoForecast(BaseModel):
    current_weather: CurrentWeather


# Briefing record. Serialized with camelCase keys.


class BriefingModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class Location(BriefingModel):
    city: str
    display_name: str
    latitude: float
    longitude: float


class SatellitePosition(BriefingModel):
    latitude: float
    longitude: float
    timestamp: int


class LaunchEvent(BriefingModel):
    name: str
    date_utc: str
    webcast: Optional[str] = None


class SkyImage(BriefingModel):
    date: str
    title: str
    media_type: str
    url: str


class NeoBuckets(BaseModel):
    model_config = ConfigDict(frozen=True)

    lt3: int = 0
    gte3lt4: int = 0
    gte4: int = 0


class NeoSummary(BriefingModel):
    days: int
    total_count: int
    hazardous_count: int
    max_estimated_diameter_meters: float
    min_miss_distance_km: float
    buckets: NeoBuckets


ThreatLevel = Literal["LOW", "MEDIUM", "HIGH"]


class ThreatAssessment(BriefingModel):
    score: int
    level: ThreatLevel


class BriefingInput(BriefingModel):
    city: str
    days: int
    date: str
    mode: Literal["stealth", "verbose"]


class IssReport(BriefingModel):
    latitude: float
    longitude: float
    distance_km: float
    timestamp: int


class LaunchReport(BriefingModel):
    name: str
    date_utc: str
    hours_to_launch: float
    webcast: Optional[str] = None


class Briefing(BriefingModel):
    generated_at: str
    input: BriefingInput
    location: Location
    iss: IssReport
    next_launch: LaunchReport
    apod: SkyImage
    neo: NeoSummary
    threat: ThreatAssessment


class WeatherReport(BriefingModel):
    city: str
    display_name: str
    latitude: float
    longitude: float
    temperature_c: float
    wind_speed_kmh: float
    weather_code: int
