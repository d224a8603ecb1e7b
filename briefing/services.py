import logging
from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .client import HttpGetter, Response
from .errors import AdapterError
from .timing import timed
from .schemas import (
    IssNowResponse,
    LaunchEvent,
    Location,
    NasaApod,
    NasaNeoFeed,
    NominatimResult,
    OpenMeteoForecast,
    OpenMeteoGeocoding,
    OpenMeteoPlace,
    SatellitePosition,
    SkyImage,
    SpaceXNextLaunch,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


async def _get(
    client: HttpGetter,
    name: str,
    label: str,
    path: str,
    params: Optional[Dict[str, Any]] = None,
) -> Response:
    res = await timed(name, lambda: client.get(path, params=params))
    if res.status_code >= 400:
        raise AdapterError(name, f"{label} HTTP {res.status_code}")
    return res


def _body(name: str, res: Response) -> Any:
    try:
        return res.json()
    except ValueError as exc:
        logger.debug("%s returned a non-JSON body: %r", name, exc)
        raise AdapterError(name, f"Validation failed: {name}") from exc


def _validate(name: str, model: Type[M], payload: Any) -> M:
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        logger.debug("%s payload rejected: %s", name, exc)
        raise AdapterError(name, f"Validation failed: {name}") from exc


async def fetch_location(client: HttpGetter, city: str) -> Location:
    """Resolve ``city`` to coordinates with Nominatim; first match wins."""

    name = "Nominatim search"
    res = await _get(
        client,
        name,
        "Nominatim",
        "/search",
        {"format": "json", "q": city, "limit": 1},
    )
    results = _body(name, res)
    if not isinstance(results, list):
        raise AdapterError(name, f"Validation failed: {name}")
    if not results:
        raise AdapterError(name, f"City not found: {city}")

    first = _validate(name, NominatimResult, results[0])
    return Location(
        city=city,
        display_name=first.display_name,
        latitude=first.lat,
        longitude=first.lon,
    )


async def fetch_iss_position(client: HttpGetter) -> SatellitePosition:
    name = "ISS now"
    res = await _get(client, name, "ISS", "/iss-now.json")
    data = _validate(name, IssNowResponse, _body(name, res))
    return SatellitePosition(
        latitude=data.iss_position.latitude,
        longitude=data.iss_position.longitude,
        timestamp=data.timestamp,
    )


async def fetch_next_launch(client: HttpGetter) -> LaunchEvent:
    name = "SpaceX next"
    res = await _get(client, name, "SpaceX", "/v4/launches/next")
    data = _validate(name, SpaceXNextLaunch, _body(name, res))
    return LaunchEvent(
        name=data.name,
        date_utc=data.date_utc,
        webcast=data.links.webcast if data.links else None,
    )


async def fetch_apod(client: HttpGetter, api_key: str, date: str) -> SkyImage:
    """Fetch NASA's astronomy picture of the day for ``date``."""

    name = "NASA APOD"
    res = await _get(
        client,
        name,
        "APOD",
        "/planetary/apod",
        {"api_key": api_key, "date": date},
    )
    data = _validate(name, NasaApod, _body(name, res))
    return SkyImage(
        date=data.date,
        title=data.title,
        media_type=data.media_type,
        url=data.url,
    )


async def fetch_neo_feed(
    client: HttpGetter, api_key: str, start_date: str, end_date: str
) -> NasaNeoFeed:
    """Fetch the NEO feed for the inclusive ``start_date``..``end_date`` range."""

    name = "NASA NEO feed"
    params = {
        "api_key": api_key,
        "start_date": start_date,
        "end_date": end_date,
    }
    res = await _get(client, name, "NEO", "/neo/rest/v1/feed", params)
    return _validate(name, NasaNeoFeed, _body(name, res))


async def fetch_place(client: HttpGetter, city: str) -> OpenMeteoPlace:
    name = "Open-Meteo geocoding"
    res = await _get(
        client,
        name,
        "Geocoding",
        "/v1/search",
        {"name": city, "count": 1},
    )
    data = _validate(name, OpenMeteoGeocoding, _body(name, res))
    if not data.results:
        raise AdapterError(name, f"City not found: {city}")
    return data.results[0]


async def fetch_forecast(
    client: HttpGetter, latitude: float, longitude: float
) -> OpenMeteoForecast:
    name = "Open-Meteo forecast"
    params = {
        "latitude": latitude,
        "longitude": longitude,
        "current_weather": "true",
    }
    res = await _get(client, name, "Forecast", "/v1/forecast", params)
    return _validate(name, OpenMeteoForecast, _body(name, res))
