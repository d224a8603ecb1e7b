import os

NOMINATIM_BASE = "https://nominatim.openstreetmap.org"
OPEN_NOTIFY_BASE = "http://api.open-notify.org"
SPACEX_BASE = "https://api.spacexdata.com"
NASA_BASE = "https://api.nasa.gov"

OPEN_METEO_GEOCODING_BASE = "https://geocoding-api.open-meteo.com"
OPEN_METEO_FORECAST_BASE = "https://api.open-meteo.com"

USER_AGENT = "spaceops-briefing/1.0 (contact: local)"
TIMEOUT_SECONDS = 15.0

# NASA NEO feed rejects ranges longer than a week
NEO_MAX_DAYS = 7

DEFAULT_DAYS = 3
DEFAULT_MODE = "stealth"
MODES = ("stealth", "verbose")

NASA_API_KEY = "DEMO_KEY"
OUTPUT_PATH = "briefing.json"


def nasa_api_key() -> str:
    return os.getenv("NASA_API_KEY", NASA_API_KEY)


def output_path() -> str:
    return os.getenv("BRIEFING_OUTPUT", OUTPUT_PATH)
