"""
Tests for settings parsing and identifier validation.
"""

import pytest
from pydantic import ValidationError

from snam_baitong.config import Settings


def test_allowed_fields_from_csv():
    settings = Settings(INFLUXDB_ALLOWED_FIELDS="temperature, moisture ,ph")

    assert settings.INFLUXDB_ALLOWED_FIELDS == ["temperature", "moisture", "ph"]


def test_allowed_fields_reject_sql():
    with pytest.raises(ValidationError):
        Settings(INFLUXDB_ALLOWED_FIELDS="temperature,1=1 OR x")


@pytest.mark.parametrize("name", ['sensor"; DROP TABLE x; --', "sensor data", "9lives", ""])
def test_measurement_must_be_identifier(name):
    with pytest.raises(ValidationError):
        Settings(INFLUXDB_MEASUREMENT=name)


def test_cors_origins_from_csv():
    settings = Settings(CORS_ORIGINS="http://a.test,http://b.test")

    assert settings.CORS_ORIGINS == ["http://a.test", "http://b.test"]


def test_log_level_uppercased():
    assert Settings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"
