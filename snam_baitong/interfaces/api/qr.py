"""QR API routes — mint, revoke, list and public scan."""

from fastapi import APIRouter, Depends, Path, status

from snam_baitong.application.services import qr_service
from snam_baitong.domain.repositories.plant_repository import PlantRepository
from snam_baitong.domain.repositories.qr_token_repository import QRTokenRepository
from snam_baitong.domain.schemas.auth import Identity
from snam_baitong.domain.schemas.common import MAX_ID
from snam_baitong.domain.schemas.qr import QRGenerateRequest
from snam_baitong.infrastructure.timeseries import SensorReader
from snam_baitong.interfaces.api.deps import get_current_identity, require_admin
from snam_baitong.interfaces.deps import get_plant_repository, get_qr_token_repository, get_sensor_reader

router = APIRouter(prefix="/api/qr", tags=["QR"])


@router.post("/generate", status_code=status.HTTP_201_CREATED)
def generate_qr(
    body: QRGenerateRequest,
    qr_repo: QRTokenRepository = Depends(get_qr_token_repository),
    plant_repo: PlantRepository = Depends(get_plant_repository),
    identity: Identity = Depends(get_current_identity),
):
    data = qr_service.generate(qr_repo, plant_repo, body)
    return {"success": True, "data": data}


@router.post("/revoke/{token}")
def revoke_qr(
    token: str,
    qr_repo: QRTokenRepository = Depends(get_qr_token_repository),
    identity: Identity = Depends(require_admin),
):
    return {"success": True, "data": qr_service.revoke(qr_repo, token)}


@router.get("/plant/{plant_id}")
def list_plant_tokens(
    plant_id: int = Path(..., ge=1, le=MAX_ID),
    qr_repo: QRTokenRepository = Depends(get_qr_token_repository),
    plant_repo: PlantRepository = Depends(get_plant_repository),
    identity: Identity = Depends(get_current_identity),
):
    return {"success": True, "data": qr_service.list_for_plant(qr_repo, plant_repo, plant_id)}


@router.get("/scan/{token}")
def scan_qr(
    token: str,
    qr_repo: QRTokenRepository = Depends(get_qr_token_repository),
    plant_repo: PlantRepository = Depends(get_plant_repository),
    reader: SensorReader = Depends(get_sensor_reader),
):
    """Public: no bearer token required."""
    return qr_service.scan(qr_repo, plant_repo, reader, token)
