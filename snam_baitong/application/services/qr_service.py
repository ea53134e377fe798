"""QR service: mint, revoke and scan plant QR tokens."""

import base64
import secrets
from datetime import datetime
from io import BytesIO
from typing import Any, Dict, List, Optional
from urllib.parse import urlencode

import qrcode
import structlog

from snam_baitong.application.services.sensor_service import compute_plant_status, fetch_latest_snapshot
from snam_baitong.config import get_settings
from snam_baitong.core.clock import as_utc, isoformat_utc, utcnow
from snam_baitong.core.exceptions import (
    ConflictException,
    EntityNotFoundException,
    GoneException,
    ValidationException,
)
from snam_baitong.domain.enums import QRTokenState
from snam_baitong.domain.models.qr_token import QRToken
from snam_baitong.domain.repositories.plant_repository import PlantRepository
from snam_baitong.domain.repositories.qr_token_repository import QRTokenRepository
from snam_baitong.domain.schemas.qr import QRGenerateRequest, QRTokenRead
from snam_baitong.infrastructure.timeseries import SensorReader

settings = get_settings()
logger = structlog.get_logger(__name__)

INVALID_TOKEN = "Invalid token"


def qr_state(qr: QRToken, now: Optional[datetime] = None) -> QRTokenState:
    """valid while now <= expires_at and not revoked; both other states are terminal."""
    if qr.revoked_at is not None:
        return QRTokenState.REVOKED
    now = as_utc(now) if now is not None else utcnow()
    if now > as_utc(qr.expires_at):
        return QRTokenState.EXPIRED
    return QRTokenState.VALID


def build_scan_url(token: str) -> str:
    separator = "&" if "?" in settings.QR_BASE_URL else "?"
    return f"{settings.QR_BASE_URL}{separator}{urlencode({'token': token})}"


def render_qr_data_url(content: str) -> str:
    img = qrcode.make(content)
    buffer = BytesIO()
    img.save(buffer, format="PNG")
    encoded = base64.b64encode(buffer.getvalue()).decode()
    return f"data:image/png;base64,{encoded}"


def _new_token() -> str:
    return secrets.token_hex(settings.QR_TOKEN_BYTES)


def generate(
    qr_repo: QRTokenRepository,
    plant_repo: PlantRepository,
    body: QRGenerateRequest,
) -> Dict[str, Any]:
    if body.plant_id is None or body.expires_at is None:
        raise ValidationException("plantId and expiresAt are required")

    if plant_repo.get_by_id(body.plant_id) is None:
        raise EntityNotFoundException("Plant not found")

    expires_at = as_utc(body.expires_at)
    try:
        qr = qr_repo.create(body.plant_id, _new_token(), expires_at)
    except ConflictException:
        logger.warning("QR token collision, retrying", plant_id=body.plant_id)
        qr = qr_repo.create(body.plant_id, _new_token(), expires_at)

    url = build_scan_url(qr.token)
    logger.info("QR token generated", plant_id=body.plant_id, qr_id=qr.id, expires_at=isoformat_utc(expires_at))
    return {
        "token": qr.token,
        "expiresAt": isoformat_utc(qr.expires_at),
        "url": url,
        "qrDataUrl": render_qr_data_url(url),
    }


def revoke(qr_repo: QRTokenRepository, token: str) -> Dict[str, Any]:
    qr = qr_repo.get_by_token(token)
    if qr is None or qr.revoked_at is not None:
        raise EntityNotFoundException(INVALID_TOKEN)

    qr = qr_repo.revoke(qr, utcnow())
    logger.info("QR token revoked", qr_id=qr.id, plant_id=qr.plant_id)
    return QRTokenRead.model_validate(qr).model_copy(update={"state": QRTokenState.REVOKED}).to_json()


def list_for_plant(
    qr_repo: QRTokenRepository,
    plant_repo: PlantRepository,
    plant_id: int,
) -> List[Dict[str, Any]]:
    if plant_repo.get_by_id(plant_id) is None:
        raise EntityNotFoundException("Plant not found")

    now = utcnow()
    return [
        QRTokenRead.model_validate(qr).model_copy(update={"state": qr_state(qr, now)}).to_json()
        for qr in qr_repo.list_for_plant(plant_id)
    ]


def scan(
    qr_repo: QRTokenRepository,
    plant_repo: PlantRepository,
    reader: SensorReader,
    token: str,
) -> Dict[str, Any]:
    """Public aggregated view: plant metadata, crop status and the latest sensor snapshot.

    Revoked tokens are reported exactly like unknown ones. Expired tokens get a
    410 carrying expiresAt so the client can show when the code lapsed.
    """
    qr = qr_repo.get_by_token(token)
    if qr is None:
        raise EntityNotFoundException(INVALID_TOKEN)

    now = utcnow()
    state = qr_state(qr, now)
    if state is QRTokenState.REVOKED:
        raise EntityNotFoundException(INVALID_TOKEN)
    if state is QRTokenState.EXPIRED:
        raise GoneException("QR token expired", details={"expiresAt": isoformat_utc(qr.expires_at)})

    plant = plant_repo.get_by_id(qr.plant_id)
    if plant is None:
        logger.error("QR token points at a missing plant", qr_id=qr.id, plant_id=qr.plant_id)
        raise EntityNotFoundException("Plant not found for token")

    snapshot = fetch_latest_snapshot(reader) or {}
    readings = snapshot.get("readings") or {}

    return {
        "success": True,
        "meta": {
            "farmerImage": plant.farmer_image_url,
            "farmLocation": plant.farm_location,
            "plantName": plant.plant_name,
            "plantedDate": plant.planted_date.isoformat() if plant.planted_date else None,
            "harvestDate": plant.harvest_date.isoformat() if plant.harvest_date else None,
            "plantStatus": plant.status.value,
        },
        "status": compute_plant_status(readings),
        "data": readings,
        "location": snapshot.get("location"),
        "recordedAt": snapshot.get("recordedAt"),
        "qr": {"expiresAt": isoformat_utc(qr.expires_at), "valid": True},
        "timestamp": isoformat_utc(now),
    }
