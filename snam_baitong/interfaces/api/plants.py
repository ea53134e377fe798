"""Plants API routes — registry CRUD."""

from fastapi import APIRouter, Depends, Path, Query, status

from snam_baitong.application.services import plant_service
from snam_baitong.domain.repositories.plant_repository import PlantRepository
from snam_baitong.domain.schemas.auth import Identity
from snam_baitong.domain.schemas.common import MAX_ID
from snam_baitong.domain.schemas.plant import PlantCreate, PlantUpdate
from snam_baitong.infrastructure.timeseries import SensorReader
from snam_baitong.interfaces.api.deps import get_current_identity, require_admin
from snam_baitong.interfaces.deps import get_plant_repository, get_sensor_reader

router = APIRouter(prefix="/api/plants", tags=["Plants"])


@router.get("")
def list_plants(
    include_latest: bool = Query(False, alias="includeLatest"),
    repo: PlantRepository = Depends(get_plant_repository),
    reader: SensorReader = Depends(get_sensor_reader),
    identity: Identity = Depends(get_current_identity),
):
    data = plant_service.list_plants(repo, reader, include_latest=include_latest)
    return {"success": True, "data": data}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_plant(
    body: PlantCreate,
    repo: PlantRepository = Depends(get_plant_repository),
    identity: Identity = Depends(require_admin),
):
    plant = plant_service.create_plant(repo, body)
    return {"success": True, "data": plant_service.serialize_plant(plant)}


@router.get("/{plant_id}")
def get_plant(
    plant_id: int = Path(..., ge=1, le=MAX_ID),
    include_sensors: bool = Query(False, alias="includeSensors"),
    repo: PlantRepository = Depends(get_plant_repository),
    reader: SensorReader = Depends(get_sensor_reader),
    identity: Identity = Depends(get_current_identity),
):
    data = plant_service.get_plant(repo, plant_id, reader, include_sensors=include_sensors)
    return {"success": True, "data": data}


@router.put("/{plant_id}")
def update_plant(
    body: PlantUpdate,
    plant_id: int = Path(..., ge=1, le=MAX_ID),
    repo: PlantRepository = Depends(get_plant_repository),
    identity: Identity = Depends(require_admin),
):
    plant = plant_service.update_plant(repo, plant_id, body)
    return {"success": True, "data": plant_service.serialize_plant(plant)}


@router.delete("/{plant_id}")
def delete_plant(
    plant_id: int = Path(..., ge=1, le=MAX_ID),
    repo: PlantRepository = Depends(get_plant_repository),
    identity: Identity = Depends(require_admin),
):
    plant_service.delete_plant(repo, plant_id)
    return {"success": True, "message": "Plant deleted"}
