"""InfluxDB 3 SQL HTTP client — read-only access to the sensor measurement.

Only the latest row is ever needed. The measurement name is validated as a
bare identifier at settings load; device/location filters are bound
parameters, never string-interpolated.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

import httpx

from snam_baitong.config import Settings, get_settings
from snam_baitong.core.exceptions import UpstreamServiceException

logger = logging.getLogger(__name__)


class SensorReader(Protocol):
    def latest_row(self) -> Optional[Dict[str, Any]]:
        """Most recent row of the sensor measurement, or None when empty."""
        ...


class InfluxSQLReader:
    """Client for the InfluxDB 3 `/api/v3/query_sql` endpoint."""

    def __init__(
        self,
        base_url: str,
        token: str,
        database: str,
        measurement: str,
        device: Optional[str] = None,
        location: Optional[str] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.url = f"{base_url.rstrip('/')}/api/v3/query_sql"
        self.database = database
        self.measurement = measurement
        self.device = device
        self.location = location
        self.timeout = timeout
        self.transport = transport
        self.headers = {"Content-Type": "application/json"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"

    def query(self, sql: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        payload: Dict[str, Any] = {"db": self.database, "q": sql, "format": "json"}
        if params:
            payload["params"] = params

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.url, json=payload, headers=self.headers)
                response.raise_for_status()
                rows = response.json()
        except httpx.HTTPStatusError as e:
            body = e.response.text[:200] if e.response.text else "No response body"
            logger.warning(f"InfluxDB query failed: {e.response.status_code} - {body}")
            raise UpstreamServiceException("Sensor store unavailable") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"InfluxDB connection error: {e}")
            raise UpstreamServiceException("Sensor store unavailable") from e

        if not isinstance(rows, list):
            raise UpstreamServiceException("Sensor store returned an unexpected payload")
        return rows

    def latest_row(self) -> Optional[Dict[str, Any]]:
        filters = []
        params: Dict[str, Any] = {}
        if self.device:
            filters.append("device = $device")
            params["device"] = self.device
        if self.location:
            filters.append("location = $location")
            params["location"] = self.location

        where = f"WHERE {' AND '.join(filters)} " if filters else ""
        sql = f'SELECT * FROM "{self.measurement}" {where}ORDER BY time DESC LIMIT 1'
        rows = self.query(sql, params)
        return rows[0] if rows else None


class DisabledSensorReader:
    """Stand-in used when INFLUXDB_SQL_ENABLED=false (local development)."""

    def latest_row(self) -> Optional[Dict[str, Any]]:
        return None


def build_sensor_reader(settings: Optional[Settings] = None) -> SensorReader:
    settings = settings or get_settings()
    if not settings.INFLUXDB_SQL_ENABLED:
        logger.warning("INFLUXDB_SQL_ENABLED=false -> sensor reads return no data")
        return DisabledSensorReader()
    return InfluxSQLReader(
        base_url=settings.INFLUXDB_URL,
        token=settings.INFLUXDB_TOKEN,
        database=settings.INFLUXDB_DATABASE,
        measurement=settings.INFLUXDB_MEASUREMENT,
        device=settings.INFLUXDB_DEVICE,
        location=settings.INFLUXDB_LOCATION,
        timeout=settings.INFLUXDB_TIMEOUT_SECONDS,
    )
