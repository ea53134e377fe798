"""
Tests for the InfluxDB SQL reader against a mocked HTTP transport.
"""

import json

import httpx
import pytest

from snam_baitong.core.exceptions import UpstreamServiceException
from snam_baitong.infrastructure.timeseries import InfluxSQLReader


def make_reader(handler, **kwargs):
    return InfluxSQLReader(
        base_url="http://influx:8181/",
        token="secret-token",
        database="farm",
        measurement="sensor_data",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_latest_row_query_shape():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[{"time": "2026-10-19T08:00:00Z", "temperature": 26.1}])

    row = make_reader(handler).latest_row()

    assert row == {"time": "2026-10-19T08:00:00Z", "temperature": 26.1}
    assert seen["url"] == "http://influx:8181/api/v3/query_sql"
    assert seen["auth"] == "Bearer secret-token"
    assert seen["body"]["db"] == "farm"
    assert seen["body"]["format"] == "json"
    assert seen["body"]["q"] == 'SELECT * FROM "sensor_data" ORDER BY time DESC LIMIT 1'
    assert "params" not in seen["body"]


def test_device_and_location_are_bound_parameters():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=[])

    row = make_reader(handler, device="node'; DROP", location="Takeo").latest_row()

    assert row is None
    assert seen["body"]["q"] == (
        'SELECT * FROM "sensor_data" WHERE device = $device AND location = $location '
        "ORDER BY time DESC LIMIT 1"
    )
    assert seen["body"]["params"] == {"device": "node'; DROP", "location": "Takeo"}


def test_http_error_becomes_upstream_failure():
    reader = make_reader(lambda request: httpx.Response(503, text="down"))

    with pytest.raises(UpstreamServiceException) as exc:
        reader.latest_row()

    assert exc.value.message == "Sensor store unavailable"


def test_connection_error_becomes_upstream_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(UpstreamServiceException):
        make_reader(handler).latest_row()


def test_unexpected_payload():
    reader = make_reader(lambda request: httpx.Response(200, json={"error": "nope"}))

    with pytest.raises(UpstreamServiceException):
        reader.query("SELECT 1")
