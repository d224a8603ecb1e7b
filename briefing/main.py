import argparse
import asyncio
import logging
import re
import sys
from datetime import date, datetime, timezone
from typing import List, Optional

from prometheus_client import REGISTRY, write_to_textfile
from rich.console import Console
from rich.markup import escape

from . import config
from .errors import ArgumentError, BriefingError, WriteError
from .pipeline import build_briefing, open_clients
from .presenter import print_lines, summary_lines, write_briefing
from .schemas import Briefing, BriefingInput

logger = logging.getLogger(__name__)

error_console = Console(stderr=True, highlight=False)

DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)


class ArgumentParser(argparse.ArgumentParser):
    """argparse exits with status 2 on its own; surface errors as ours."""

    def error(self, message):
        raise ArgumentError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = ArgumentParser(
        prog="spaceops-briefing",
        description="Mission briefing for a city: ISS, launches, APOD and NEOs.",
    )
    parser.add_argument("--city", help='city to brief, e.g. --city "Berlin"')
    parser.add_argument("--days", default=str(config.DEFAULT_DAYS), help="NEO window in days")
    parser.add_argument("--mode", default=config.DEFAULT_MODE, help="stealth or verbose")
    parser.add_argument("--date", help="YYYY-MM-DD, defaults to today (UTC)")
    parser.add_argument("--output", default=None, help="where to write the briefing JSON")
    parser.add_argument("--metrics-file", default=None, help="write Prometheus metrics here")
    return parser


def validate_city(city: Optional[str]) -> str:
    if not city or not city.strip():
        raise ArgumentError('Missing required argument: --city "City Name"')
    return city


def validate_days(raw: Optional[str]) -> int:
    try:
        days = int(raw)
    except (TypeError, ValueError):
        raise ArgumentError("Missing or invalid argument: --days <number>")
    if days < 1:
        raise ArgumentError("Missing or invalid argument: --days <number>")
    return days


def validate_mode(mode: str) -> str:
    if mode not in config.MODES:
        raise ArgumentError("Invalid --mode. Use stealth or verbose.")
    return mode


def validate_date(raw: Optional[str]) -> str:
    if raw is None:
        return datetime.now(timezone.utc).date().isoformat()
    if not DATE_RE.fullmatch(raw):
        raise ArgumentError("Invalid --date. Use YYYY-MM-DD.")
    try:
        date.fromisoformat(raw)
    except ValueError:
        raise ArgumentError("Invalid --date. Use YYYY-MM-DD.")
    return raw


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    args.city = validate_city(args.city)
    args.days = validate_days(args.days)
    args.mode = validate_mode(args.mode)
    args.date = validate_date(args.date)
    args.output = args.output or config.output_path()
    return args


def configure_logging(mode: str) -> None:
    package_logger = logging.getLogger("briefing")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("[debug] %(message)s"))
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if mode == "verbose" else logging.WARNING)
    package_logger.propagate = False


def report_error(exc: BaseException) -> None:
    error_console.print(f"[red]Error:[/red] {escape(str(exc))}", soft_wrap=True)


async def run(args: argparse.Namespace) -> Briefing:
    params = BriefingInput(city=args.city, days=args.days, date=args.date, mode=args.mode)
    async with open_clients() as clients:
        return await build_briefing(params, clients, config.nasa_api_key())


def main(argv: Optional[List[str]] = None) -> int:
    try:
        args = parse_args(argv)
    except ArgumentError as exc:
        report_error(exc)
        return 1

    configure_logging(args.mode)

    status = 0
    try:
        briefing = asyncio.run(run(args))
        saved = write_briefing(briefing, args.output)
        print_lines(summary_lines(briefing, saved))
    except BriefingError as exc:
        logger.debug("run aborted: %r", exc)
        report_error(exc)
        status = 1

    if args.metrics_file:
        try:
            write_to_textfile(args.metrics_file, REGISTRY)
        except OSError as exc:
            report_error(WriteError(f"Could not write {args.metrics_file}: {exc}"))
            status = 1
    return status


if __name__ == "__main__":
    raise SystemExit(main())
