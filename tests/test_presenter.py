import json

import pytest
from pydantic import ValidationError

from briefing.errors import WriteError
from briefing.presenter import summary_lines, to_fixed, write_briefing
from briefing.schemas import (
    Briefing,
    BriefingInput,
    IssReport,
    LaunchReport,
    Location,
    NeoBuckets,
    NeoSummary,
    SkyImage,
    ThreatAssessment,
)


@pytest.fixture
def briefing():
    return Briefing(
        generated_at="2024-01-01T00:00:00.000Z",
        input=BriefingInput(city="Lima", days=2, date="2024-01-01", mode="verbose"),
        location=Location(city="Lima", display_name="Lima, Peru", latitude=-12.05, longitude=-77.04),
        iss=IssReport(latitude=1.0, longitude=2.0, distance_km=8765.4321, timestamp=1),
        next_launch=LaunchReport(name="Transporter-10", date_utc="2024-01-03T00:00:00.000Z", hours_to_launch=47.96),
        apod=SkyImage(date="2024-01-01", title="Moon", media_type="video", url="https://youtu.be/m"),
        neo=NeoSummary(
            days=2,
            total_count=4,
            hazardous_count=0,
            max_estimated_diameter_meters=12.4,
            min_miss_distance_km=0,
            buckets=NeoBuckets(lt3=4),
        ),
        threat=ThreatAssessment(score=4, level="LOW"),
    )


def test_summary_lines(briefing):
    assert summary_lines(briefing, "briefing.json") == [
        "Mission Briefing: Lima, Peru",
        "Date: 2024-01-01",
        "ISS distance: 8765 km",
        "Next launch: Transporter-10 (48.0 hours)",
        "APOD: Moon",
        "NEOs (2 days): 4 | hazardous: 0 | closest miss: 0 km | largest est: 12 m",
        "Threat Level: LOW (score 4)",
        "Saved: briefing.json",
    ]


def test_write_briefing_overwrites(briefing, tmp_path):
    path = tmp_path / "briefing.json"
    path.write_text("stale")
    write_briefing(briefing, path)

    text = path.read_text(encoding="utf-8")
    assert text.startswith('{\n  "generatedAt"')
    data = json.loads(text)
    assert data["nextLaunch"]["webcast"] is None
    assert data["iss"]["distanceKm"] == 8765.4321
    assert data["threat"] == {"score": 4, "level": "LOW"}


def test_write_briefing_failure(briefing, tmp_path):
    with pytest.raises(WriteError):
        write_briefing(briefing, tmp_path / "nope" / "briefing.json")


def test_briefing_is_immutable(briefing):
    with pytest.raises(ValidationError):
        briefing.threat = ThreatAssessment(score=99, level="HIGH")


@pytest.mark.parametrize(
    "value, digits, text",
    [
        (12.5, 0, "13"),
        (2.5, 0, "3"),
        (0.25, 1, "0.3"),
        (-2.5, 0, "-3"),
        (-12.04, 1, "-12.0"),
        (1500000.0, 0, "1500000"),
        (0, 0, "0"),
    ],
)
def test_to_fixed_rounds_halves_up(value, digits, text):
    assert to_fixed(value, digits) == text


def test_summary_lines_round_halves_up(briefing):
    halves = briefing.model_copy(
        update={
            "iss": briefing.iss.model_copy(update={"distance_km": 2.5}),
            "neo": briefing.neo.model_copy(
                update={"min_miss_distance_km": 2.5, "max_estimated_diameter_meters": 12.5}
            ),
        }
    )
    lines = summary_lines(halves, "briefing.json")
    assert lines[2] == "ISS distance: 3 km"
    assert lines[5] == "NEOs (2 days): 4 | hazardous: 0 | closest miss: 3 km | largest est: 13 m"
