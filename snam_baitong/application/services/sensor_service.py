"""Sensor service — latest snapshot from the time-series store and crop health status."""

import re
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

import pytz
import structlog

from snam_baitong.config import get_settings
from snam_baitong.core.exceptions import UpstreamServiceException
from snam_baitong.infrastructure.timeseries import SensorReader

settings = get_settings()
logger = structlog.get_logger(__name__)

# Optimal (min, max) per sensor field; readings outside flag a warning.
OPTIMAL_RANGES: Dict[str, tuple] = {
    "temperature": (18.0, 35.0),
    "moisture": (20.0, 80.0),
    "ph": (5.5, 7.5),
    "pH": (5.5, 7.5),
    "ec": (0.2, 3.0),
    "salinity": (0.0, 2.0),
}

_FRACTION_RE = re.compile(r"(\.\d+)")

UNITS: Dict[str, str] = {
    "temperature": "°C",
    "moisture": "%",
    "ec": "mS/cm",
    "ph": "",
    "pH": "",
    "nitrogen": "mg/kg",
    "phosphorus": "mg/kg",
    "potassium": "mg/kg",
    "salinity": "ppt",
}


def _json_safe(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, int) and abs(value) > 2 ** 53:
        return str(value)
    return value


def _parse_timestamp(text: str) -> datetime:
    # The store reports 1-9 fraction digits; fromisoformat wants exactly six.
    text = _FRACTION_RE.sub(lambda m: m.group(1)[:7].ljust(7, "0"), text.strip().replace(" ", "T", 1))
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_local_timestamp(value: Any, tz_name: Optional[str] = None) -> Optional[str]:
    """Render a store timestamp in the configured zone, e.g. '2026-10-19 15:04:05 +07'."""
    if value is None:
        return None
    if isinstance(value, datetime):
        moment = value
    else:
        try:
            moment = _parse_timestamp(str(value))
        except ValueError:
            return str(value)
    if moment.tzinfo is None:
        moment = pytz.utc.localize(moment)
    local = moment.astimezone(pytz.timezone(tz_name or settings.TIMEZONE))
    return local.strftime("%Y-%m-%d %H:%M:%S %Z")


def build_snapshot(
    row: Optional[Dict[str, Any]],
    allowed_fields: Iterable[str],
    tz_name: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Keep only allow-listed fields of a raw row; never leak other columns."""
    if not row:
        return None

    recorded_at = format_local_timestamp(row.get("time"), tz_name)
    readings = {}
    for field in allowed_fields:
        if field in row:
            readings[field] = {
                "value": _json_safe(row[field]),
                "time": recorded_at,
                "unit": UNITS.get(field, ""),
            }

    return {
        "readings": readings,
        "location": _json_safe(row.get("location")),
        "recordedAt": recorded_at,
    }


def fetch_latest_snapshot(reader: SensorReader) -> Optional[Dict[str, Any]]:
    """Latest snapshot; store failures propagate as UpstreamServiceException."""
    row = reader.latest_row()
    return build_snapshot(row, settings.INFLUXDB_ALLOWED_FIELDS)


def try_fetch_latest_snapshot(reader: SensorReader) -> Optional[Dict[str, Any]]:
    """Best-effort variant for listings: a sensor outage must not hide plants."""
    try:
        return fetch_latest_snapshot(reader)
    except UpstreamServiceException as e:
        logger.warning("Failed to fetch latest sensors", error=e.message)
        return None


def compute_plant_status(readings: Optional[Dict[str, Dict[str, Any]]]) -> Dict[str, Any]:
    """Summarize readings against OPTIMAL_RANGES.

    level is "unknown" with no checkable readings, "warning" when any reading
    falls outside its range, otherwise "good".
    """
    out_of_range: List[Dict[str, Any]] = []
    checked = 0
    for field, reading in (readings or {}).items():
        bounds = OPTIMAL_RANGES.get(field)
        if bounds is None:
            continue
        try:
            value = float(reading.get("value"))
        except (TypeError, ValueError):
            continue
        checked += 1
        low, high = bounds
        if value < low or value > high:
            out_of_range.append({"field": field, "value": value, "min": low, "max": high})

    if checked == 0:
        level = "unknown"
    elif out_of_range:
        level = "warning"
    else:
        level = "good"
    return {"level": level, "checked": checked, "outOfRange": out_of_range}
