"""Current weather for a city, from the Open-Meteo geocoding and forecast APIs."""

import asyncio
import logging
from typing import List, Optional

import httpx

from . import config, services
from .client import HttpGetter, create_client
from .errors import ArgumentError, BriefingError
from .main import ArgumentParser, configure_logging, report_error, validate_city, validate_mode
from .presenter import print_lines, weather_lines
from .schemas import WeatherReport

logger = logging.getLogger(__name__)


async def build_report(
    geocoding: HttpGetter, forecast: HttpGetter, city: str
) -> WeatherReport:
    # the forecast needs the coordinates, so the two calls are sequential
    place = await services.fetch_place(geocoding, city)
    current = (
        await services.fetch_forecast(forecast, place.latitude, place.longitude)
    ).current_weather
    display_name = f"{place.name}, {place.country}" if place.country else place.name
    return WeatherReport(
        city=city,
        display_name=display_name,
        latitude=place.latitude,
        longitude=place.longitude,
        temperature_c=current.temperature,
        wind_speed_kmh=current.windspeed,
        weather_code=current.weathercode,
    )


async def run(
    city: str, transport: Optional[httpx.AsyncBaseTransport] = None
) -> WeatherReport:
    async with create_client(
        config.OPEN_METEO_GEOCODING_BASE, transport=transport
    ) as geocoding, create_client(
        config.OPEN_METEO_FORECAST_BASE, transport=transport
    ) as forecast:
        return await build_report(geocoding, forecast, city)


def main(argv: Optional[List[str]] = None) -> int:
    parser = ArgumentParser(prog="spaceops-weather", description="Current weather for a city.")
    parser.add_argument("--city")
    parser.add_argument("--mode", default=config.DEFAULT_MODE)
    try:
        args = parser.parse_args(argv)
        city = validate_city(args.city)
        mode = validate_mode(args.mode)
    except ArgumentError as exc:
        report_error(exc)
        return 1

    configure_logging(mode)
    try:
        report = asyncio.run(run(city))
    except BriefingError as exc:
        report_error(exc)
        return 1
    print_lines(weather_lines(report))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
