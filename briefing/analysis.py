"""Derived metrics: distances, time to launch, NEO summary and threat score."""

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional, Tuple

from .config import NEO_MAX_DAYS
from .schemas import NasaNeoFeed, NeoBuckets, NeoSummary, ThreatAssessment

EARTH_RADIUS_KM = 6371.0

HIGH_THRESHOLD = 18
MEDIUM_THRESHOLD = 10


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in km between two points given in degrees."""

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1))
        * math.cos(math.radians(lat2))
        * math.sin(d_lon / 2) ** 2
    )
    # rounding can push a past 1 at the antipode
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def neo_date_range(start: str, days: int) -> Tuple[int, str, str]:
    """Return ``(neo_days, start_date, end_date)`` for the NEO feed.

    The window is clamped to ``NEO_MAX_DAYS`` and the end date is inclusive.
    """

    neo_days = min(days, NEO_MAX_DAYS)
    end = date.fromisoformat(start) + timedelta(days=neo_days - 1)
    return neo_days, start, end.isoformat()


def parse_utc(value: str) -> Optional[datetime]:
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (AttributeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def hours_until(date_utc: str, now: Optional[datetime] = None) -> float:
    """Hours from ``now`` to ``date_utc``; 0 when the timestamp is unparseable."""

    launch = parse_utc(date_utc)
    if launch is None:
        return 0.0
    now = now or datetime.now(timezone.utc)
    return (launch - now).total_seconds() / 3600


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            return float(value)
        except ValueError:
            return None
    return None


def synthetic_magnitude(hazardous: bool) -> float:
    # Placeholder: the feed carries no usable magnitude, so the hazard flag
    # stands in for it. Thresholds below are part of the output format.
    return 4.0 if hazardous else 2.9


def summarize_neos(feed: NasaNeoFeed, days: int) -> NeoSummary:
    total_count = 0
    hazardous_count = 0
    max_diameter = 0.0
    min_miss = math.inf
    lt3 = gte3lt4 = gte4 = 0

    for neos in (feed.near_earth_objects or {}).values():
        for neo in neos:
            total_count += 1
            hazardous = bool(neo.is_potentially_hazardous_asteroid)
            if hazardous:
                hazardous_count += 1

            meters = neo.estimated_diameter.meters if neo.estimated_diameter else None
            if meters is not None:
                diameter = meters.estimated_diameter_max
                if (
                    isinstance(diameter, (int, float))
                    and not isinstance(diameter, bool)
                    and diameter > max_diameter
                ):
                    max_diameter = float(diameter)

            magnitude = synthetic_magnitude(hazardous)
            if magnitude < 3:
                lt3 += 1
            elif magnitude < 4:
                gte3lt4 += 1
            else:
                gte4 += 1

            miss_km = math.inf
            if neo.close_approach_data:
                approach = neo.close_approach_data[0]
                if approach is not None and approach.miss_distance is not None:
                    parsed = _as_number(approach.miss_distance.kilometers)
                    if parsed is not None and not math.isnan(parsed):
                        miss_km = parsed
            if miss_km < min_miss:
                min_miss = miss_km

    # no valid approach distance: report 0, indistinguishable from a hit
    if not math.isfinite(min_miss):
        min_miss = 0.0

    return NeoSummary(
        days=days,
        total_count=total_count,
        hazardous_count=hazardous_count,
        max_estimated_diameter_meters=max_diameter,
        min_miss_distance_km=min_miss,
        buckets=NeoBuckets(lt3=lt3, gte3lt4=gte3lt4, gte4=gte4),
    )


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_threat(
    neo: NeoSummary, iss_distance_km: float, hours_to_launch: float
) -> ThreatAssessment:
    if neo.min_miss_distance_km == 0:
        miss_risk = 0.0
    else:
        miss_risk = max(0.0, 3 - neo.min_miss_distance_km / 1_000_000)
    size_risk = min(5.0, neo.max_estimated_diameter_meters / 100)
    iss_risk = max(0.0, 2 - iss_distance_km / 2_000)
    launch_risk = max(0.0, 2 - hours_to_launch / 24)

    score = round_half_up(
        neo.hazardous_count * 3
        + neo.total_count * 0.2
        + miss_risk * 4
        + size_risk * 2
        + iss_risk * 2
        + launch_risk * 1
    )

    if score >= HIGH_THRESHOLD:
        level = "HIGH"
    elif score >= MEDIUM_THRESHOLD:
        level = "MEDIUM"
    else:
        level = "LOW"
    return ThreatAssessment(score=score, level=level)
