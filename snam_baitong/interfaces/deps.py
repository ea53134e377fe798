"""
API Dependencies.
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.orm import Session

from snam_baitong.domain.models.plant import Plant
from snam_baitong.domain.models.user import User
from snam_baitong.domain.repositories.plant_repository import PlantRepository
from snam_baitong.domain.repositories.qr_token_repository import QRTokenRepository
from snam_baitong.domain.repositories.revoked_token_repository import RevokedTokenRepository
from snam_baitong.domain.repositories.user_repository import UserRepository
from snam_baitong.infrastructure.database import get_db
from snam_baitong.infrastructure.repositories.plant_repository import SQLAlchemyPlantRepository
from snam_baitong.infrastructure.repositories.qr_token_repository import SQLAlchemyQRTokenRepository
from snam_baitong.infrastructure.repositories.revoked_token_repository import SQLAlchemyRevokedTokenRepository
from snam_baitong.infrastructure.repositories.user_repository import SQLAlchemyUserRepository
from snam_baitong.infrastructure.telegram import TelegramBotClient, build_telegram_client
from snam_baitong.infrastructure.timeseries import SensorReader, build_sensor_reader


def get_plant_repository(db: Session = Depends(get_db)) -> PlantRepository:
    """Get plant repository instance."""
    return SQLAlchemyPlantRepository(db, Plant)


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_qr_token_repository(db: Session = Depends(get_db)) -> QRTokenRepository:
    return SQLAlchemyQRTokenRepository(db)


def get_revoked_token_repository(db: Session = Depends(get_db)) -> RevokedTokenRepository:
    return SQLAlchemyRevokedTokenRepository(db)


@lru_cache
def get_sensor_reader() -> SensorReader:
    """One reader per process, built from settings."""
    return build_sensor_reader()


@lru_cache
def get_telegram_client() -> TelegramBotClient:
    return build_telegram_client()
