"""Snam Baitong Backend — Configuration via pydantic-settings."""

import re
from functools import lru_cache
from typing import List, Optional, Union

from pydantic import field_validator
from pydantic_settings import BaseSettings

IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

DEFAULT_SENSOR_FIELDS = [
    "temperature",
    "moisture",
    "ec",
    "ph",
    "pH",
    "nitrogen",
    "phosphorus",
    "potassium",
    "salinity",
]


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "mysql+pymysql://root:@localhost:3306/snam_baitong"

    # Security
    SECRET_KEY: str = "change-me-in-prod"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_MINUTES: int = 720

    # Bootstrap admin
    ADMIN_USERNAME: str = "admin"
    ADMIN_PASSWORD: str = "admin123"

    # InfluxDB (SQL query API)
    INFLUXDB_URL: str = "http://localhost:8181"
    INFLUXDB_TOKEN: str = ""
    INFLUXDB_DATABASE: str = "farm"
    INFLUXDB_SQL_ENABLED: bool = True
    INFLUXDB_MEASUREMENT: str = "sensor_data"
    INFLUXDB_DEVICE: Optional[str] = None
    INFLUXDB_LOCATION: Optional[str] = None
    INFLUXDB_ALLOWED_FIELDS: Union[List[str], str] = DEFAULT_SENSOR_FIELDS
    INFLUXDB_TIMEOUT_SECONDS: float = 10.0

    # QR codes
    QR_BASE_URL: str = "https://example.com/qr"
    QR_TOKEN_BYTES: int = 32

    # Telegram bot
    TELEGRAM_BOT_TOKEN: str = ""
    TELEGRAM_CHAT_ID: Optional[str] = None
    TELEGRAM_API_URL: str = "https://api.telegram.org"
    TELEGRAM_WEBHOOK_SECRET: Optional[str] = None
    TELEGRAM_TIMEOUT_SECONDS: float = 10.0

    # Timezone
    TIMEZONE: str = "Asia/Phnom_Penh"

    # Scheduler
    SCHEDULER_ENABLED: bool = True
    REVOCATION_PURGE_HOUR: int = 0

    # CORS
    CORS_ORIGINS: Union[List[str], str] = ["http://localhost:5173", "http://localhost:3000"]

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str) and not v.startswith("["):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("INFLUXDB_ALLOWED_FIELDS", mode="before")
    @classmethod
    def split_allowed_fields(cls, v):
        if isinstance(v, str) and not v.startswith("["):
            v = [f.strip() for f in v.split(",") if f.strip()]
        for name in v:
            if not IDENTIFIER_RE.match(name):
                raise ValueError(f"Invalid sensor field name: {name!r}")
        return v

    @field_validator("INFLUXDB_MEASUREMENT")
    @classmethod
    def validate_measurement(cls, v: str) -> str:
        # Interpolated into SQL as a quoted identifier, so it must stay a bare name.
        if not IDENTIFIER_RE.match(v):
            raise ValueError(f"Invalid measurement name: {v!r}")
        return v

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def upper_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings()
