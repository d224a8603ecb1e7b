from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import List, Union

from rich.console import Console

from .errors import WriteError
from .schemas import Briefing, WeatherReport

console = Console(highlight=False)


def to_fixed(value: float, digits: int) -> str:
    """Fixed-point text with exact halves rounded away from zero."""

    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def write_briefing(briefing: Briefing, path: Union[str, Path]) -> Path:
    """Overwrite ``path`` with the briefing as indented camelCase JSON."""

    path = Path(path)
    try:
        with open(path, "w", encoding="utf-8") as f:
            f.write(briefing.model_dump_json(by_alias=True, indent=2))
    except OSError as exc:
        raise WriteError(f"Could not write {path}: {exc.strerror or exc}") from exc
    return path


def summary_lines(briefing: Briefing, saved_to: Union[str, Path]) -> List[str]:
    neo = briefing.neo
    return [
        f"Mission Briefing: {briefing.location.display_name}",
        f"Date: {briefing.input.date}",
        f"ISS distance: {to_fixed(briefing.iss.distance_km, 0)} km",
        f"Next launch: {briefing.next_launch.name} "
        f"({to_fixed(briefing.next_launch.hours_to_launch, 1)} hours)",
        f"APOD: {briefing.apod.title}",
        f"NEOs ({neo.days} days): {neo.total_count} | hazardous: {neo.hazardous_count}"
        f" | closest miss: {to_fixed(neo.min_miss_distance_km, 0)} km"
        f" | largest est: {to_fixed(neo.max_estimated_diameter_meters, 0)} m",
        f"Threat Level: {briefing.threat.level} (score {briefing.threat.score})",
        f"Saved: {saved_to}",
    ]


def weather_lines(report: WeatherReport) -> List[str]:
    return [
        f"Weather: {report.display_name}",
        f"Coordinates: {report.latitude:.4f}, {report.longitude:.4f}",
        f"Temperature: {report.temperature_c:.1f} C",
        f"Wind: {report.wind_speed_kmh:.1f} km/h",
        f"Weather code: {report.weather_code}",
    ]


def print_lines(lines: List[str], out: Console = console) -> None:
    for line in lines:
        out.print(line, markup=False, emoji=False, soft_wrap=True)
