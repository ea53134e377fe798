"""
Unit tests for snapshot shaping and crop status.
"""

from decimal import Decimal

from conftest import SAMPLE_ROW
from snam_baitong.application.services.sensor_service import (
    build_snapshot,
    compute_plant_status,
    format_local_timestamp,
)


def test_snapshot_keeps_only_allowed_fields():
    snapshot = build_snapshot(SAMPLE_ROW, ["temperature", "moisture", "potassium"], "UTC")

    assert set(snapshot["readings"]) == {"temperature", "moisture"}
    assert snapshot["readings"]["temperature"] == {
        "value": 27.5,
        "time": "2026-10-19 08:00:00 UTC",
        "unit": "°C",
    }
    assert snapshot["location"] == "Kampong Cham"
    assert snapshot["recordedAt"] == "2026-10-19 08:00:00 UTC"


def test_snapshot_of_empty_row():
    assert build_snapshot(None, ["temperature"]) is None
    assert build_snapshot({}, ["temperature"]) is None


def test_snapshot_converts_decimals():
    snapshot = build_snapshot({"time": None, "ec": Decimal("1.25")}, ["ec"])

    assert snapshot["readings"]["ec"]["value"] == 1.25
    assert snapshot["recordedAt"] is None


def test_local_timestamp_in_configured_zone():
    assert format_local_timestamp("2026-10-19T08:00:00Z", "Asia/Phnom_Penh") == "2026-10-19 15:00:00 +07"


def test_unparseable_timestamp_passes_through():
    assert format_local_timestamp("yesterday", "UTC") == "yesterday"


def test_status_good():
    readings = {"temperature": {"value": 25}, "moisture": {"value": 50}, "nitrogen": {"value": 999}}

    status = compute_plant_status(readings)

    assert status == {"level": "good", "checked": 2, "outOfRange": []}


def test_status_warning_lists_offending_fields():
    readings = {"temperature": {"value": 41.0}, "ph": {"value": 6.0}}

    status = compute_plant_status(readings)

    assert status["level"] == "warning"
    assert status["outOfRange"] == [{"field": "temperature", "value": 41.0, "min": 18.0, "max": 35.0}]


def test_status_unknown_without_checkable_readings():
    assert compute_plant_status(None)["level"] == "unknown"
    assert compute_plant_status({"nitrogen": {"value": 10}})["level"] == "unknown"
    assert compute_plant_status({"temperature": {"value": None}})["level"] == "unknown"


def test_short_fraction_timestamp_is_localized():
    assert format_local_timestamp("2026-10-19T08:00:00.12Z", "Asia/Phnom_Penh") == "2026-10-19 15:00:00 +07"
