import copy
import logging

import httpx
import pytest

from briefing import main as main_mod
from briefing import pipeline

NOMINATIM = [
    {"lat": "52.5200", "lon": "13.4050", "display_name": "Berlin, Germany"},
]

ISS_NOW = {
    "message": "success",
    "timestamp": 1704067200,
    "iss_position": {"latitude": "51.0000", "longitude": "10.0000"},
}

SPACEX_NEXT = {
    "name": "Crew-9",
    "date_utc": "2024-01-02T00:00:00.000Z",
    "details": None,
    "links": {"webcast": "https://youtu.be/crew9", "patch": {"small": None}},
}

APOD = {
    "date": "2024-01-01",
    "title": "Orion in Red and Blue",
    "explanation": "A nebula.",
    "media_type": "image",
    "url": "https://apod.nasa.gov/apod/image/orion.jpg",
}

NEO_FEED = {
    "element_count": 2,
    "near_earth_objects": {
        "2024-01-01": [
            {
                "name": "(2024 AA)",
                "is_potentially_hazardous_asteroid": False,
                "estimated_diameter": {
                    "meters": {"estimated_diameter_min": 22.0, "estimated_diameter_max": 50.0}
                },
                "close_approach_data": [
                    {
                        "close_approach_date": "2024-01-01",
                        "miss_distance": {"kilometers": "5000000.0"},
                    }
                ],
            }
        ],
        "2024-01-02": [
            {
                "name": "(2024 AB)",
                "is_potentially_hazardous_asteroid": True,
                "estimated_diameter": {
                    "meters": {"estimated_diameter_min": 140.0, "estimated_diameter_max": 300.0}
                },
                "close_approach_data": [
                    {
                        "close_approach_date": "2024-01-02",
                        "miss_distance": {"kilometers": "1500000.0"},
                    }
                ],
            }
        ],
    },
}

OPEN_METEO_PLACE = {
    "results": [
        {"name": "Berlin", "latitude": 52.52, "longitude": 13.41, "country": "Germany"}
    ]
}

OPEN_METEO_FORECAST = {
    "latitude": 52.52,
    "longitude": 13.41,
    "current_weather": {
        "temperature": 4.2,
        "windspeed": 12.6,
        "weathercode": 3,
        "time": "2024-01-01T12:00",
    },
}


class FakeApi:
    """Routes requests by URL path to canned ``(status, body)`` pairs."""

    def __init__(self):
        self.routes = {
            "/search": (200, copy.deepcopy(NOMINATIM)),
            "/iss-now.json": (200, copy.deepcopy(ISS_NOW)),
            "/v4/launches/next": (200, copy.deepcopy(SPACEX_NEXT)),
            "/planetary/apod": (200, copy.deepcopy(APOD)),
            "/neo/rest/v1/feed": (200, copy.deepcopy(NEO_FEED)),
            "/v1/search": (200, copy.deepcopy(OPEN_METEO_PLACE)),
            "/v1/forecast": (200, copy.deepcopy(OPEN_METEO_FORECAST)),
        }
        self.requests = []

    @property
    def paths(self):
        return [r.url.path for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self.routes[request.url.path]
        if isinstance(body, Exception):
            raise body
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url="http://test", transport=self.transport)


@pytest.fixture
def fake_api():
    return FakeApi()


@pytest.fixture
def offline(fake_api, monkeypatch, tmp_path):
    """Run the CLI against ``fake_api`` from inside ``tmp_path``."""

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BRIEFING_OUTPUT", raising=False)
    monkeypatch.setattr(
        main_mod, "open_clients", lambda: pipeline.open_clients(transport=fake_api.transport)
    )
    return fake_api


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    package_logger = logging.getLogger("briefing")
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True
