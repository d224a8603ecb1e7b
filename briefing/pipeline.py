import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, NamedTuple, Optional

import httpx

from . import config, services
from .analysis import compute_threat, haversine_km, hours_until, neo_date_range, summarize_neos
from .client import HttpGetter, create_client
from .schemas import Briefing, BriefingInput, IssReport, LaunchReport

logger = logging.getLogger(__name__)


class Clients(NamedTuple):
    nominatim: HttpGetter
    open_notify: HttpGetter
    spacex: HttpGetter
    nasa: HttpGetter


@asynccontextmanager
async def open_clients(
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[Clients]:
    async with create_client(
        config.NOMINATIM_BASE,
        headers={"User-Agent": config.USER_AGENT},
        transport=transport,
    ) as nominatim, create_client(
        config.OPEN_NOTIFY_BASE, transport=transport
    ) as open_notify, create_client(
        config.SPACEX_BASE, transport=transport
    ) as spacex, create_client(
        config.NASA_BASE, transport=transport
    ) as nasa:
        yield Clients(nominatim, open_notify, spacex, nasa)


def utc_timestamp(now: datetime) -> str:
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


async def build_briefing(
    params: BriefingInput,
    clients: Clients,
    api_key: str,
    now: Optional[datetime] = None,
) -> Briefing:
    """Fetch everything the briefing needs and derive the threat assessment.

    The city is resolved first so a bad city aborts before the other calls.
    The remaining four calls run concurrently and the first failure aborts
    the whole run.
    """

    neo_days, start_date, end_date = neo_date_range(params.date, params.days)

    location = await services.fetch_location(clients.nominatim, params.city)
    logger.debug(
        "resolved %s to %.4f, %.4f", params.city, location.latitude, location.longitude
    )

    iss, launch, apod, feed = await asyncio.gather(
        services.fetch_iss_position(clients.open_notify),
        services.fetch_next_launch(clients.spacex),
        services.fetch_apod(clients.nasa, api_key, params.date),
        services.fetch_neo_feed(clients.nasa, api_key, start_date, end_date),
    )

    now = now or datetime.now(timezone.utc)
    iss_distance_km = haversine_km(
        location.latitude, location.longitude, iss.latitude, iss.longitude
    )
    hours_to_launch = hours_until(launch.date_utc, now)
    neo = summarize_neos(feed, neo_days)
    threat = compute_threat(neo, iss_distance_km, hours_to_launch)

    return Briefing(
        generated_at=utc_timestamp(now),
        input=params,
        location=location,
        iss=IssReport(
            latitude=iss.latitude,
            longitude=iss.longitude,
            distance_km=iss_distance_km,
            timestamp=iss.timestamp,
        ),
        next_launch=LaunchReport(
            name=launch.name,
            date_utc=launch.date_utc,
            hours_to_launch=hours_to_launch,
            webcast=launch.webcast,
        ),
        apod=apod,
        neo=neo,
        threat=threat,
    )
