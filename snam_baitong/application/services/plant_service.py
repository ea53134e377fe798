"""Plant service — plant registry CRUD with optional sensor snapshot."""

from typing import Any, Dict, List, Optional

import structlog

from snam_baitong.application.services.sensor_service import try_fetch_latest_snapshot
from snam_baitong.core.exceptions import EntityNotFoundException, ValidationException
from snam_baitong.domain.enums import PlantStatus, allowed_values
from snam_baitong.domain.models.plant import Plant
from snam_baitong.domain.repositories.plant_repository import PlantRepository
from snam_baitong.domain.schemas.plant import PlantCreate, PlantRead, PlantUpdate
from snam_baitong.infrastructure.timeseries import SensorReader

logger = structlog.get_logger(__name__)

REQUIRED_FIELDS_MESSAGE = "farmLocation and plantName are required"


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


def serialize_plant(plant: Plant, latest_sensors: Any = ...) -> Dict[str, Any]:
    data = PlantRead.model_validate(plant).to_json()
    if latest_sensors is not ...:
        data["latestSensors"] = latest_sensors
    return data


def get_plant_or_404(repo: PlantRepository, plant_id: int) -> Plant:
    plant = repo.get_by_id(plant_id)
    if plant is None:
        raise EntityNotFoundException("Plant not found")
    return plant


def create_plant(repo: PlantRepository, body: PlantCreate) -> Plant:
    if _blank(body.farm_location) or _blank(body.plant_name):
        raise ValidationException(REQUIRED_FIELDS_MESSAGE)

    plant = repo.create({
        "farmer_image_url": body.farmer_image_url,
        "farm_location": body.farm_location.strip(),
        "plant_name": body.plant_name.strip(),
        "planted_date": body.planted_date,
        "harvest_date": body.harvest_date,
        "status": body.status or PlantStatus.WELL_PLANTED,
    })
    logger.info("Plant created", plant_id=plant.id, status=plant.status.value)
    return plant


def list_plants(
    repo: PlantRepository,
    reader: Optional[SensorReader] = None,
    include_latest: bool = False,
) -> List[Dict[str, Any]]:
    """All plants, newest first.

    With include_latest the same global snapshot is attached to every row;
    readings are not scoped per plant.
    """
    plants = repo.list()
    if not include_latest:
        return [serialize_plant(p) for p in plants]

    snapshot = try_fetch_latest_snapshot(reader) if reader is not None else None
    return [serialize_plant(p, snapshot) for p in plants]


def get_plant(
    repo: PlantRepository,
    plant_id: int,
    reader: Optional[SensorReader] = None,
    include_sensors: bool = False,
) -> Dict[str, Any]:
    plant = get_plant_or_404(repo, plant_id)
    if not include_sensors:
        return serialize_plant(plant)
    snapshot = try_fetch_latest_snapshot(reader) if reader is not None else None
    return serialize_plant(plant, snapshot)


def update_plant(repo: PlantRepository, plant_id: int, body: PlantUpdate) -> Plant:
    plant = get_plant_or_404(repo, plant_id)

    updates = body.model_dump(exclude_unset=True)
    if not updates:
        raise ValidationException("No fields to update")

    for field in ("farm_location", "plant_name"):
        if field in updates:
            if _blank(updates[field]):
                raise ValidationException(REQUIRED_FIELDS_MESSAGE)
            updates[field] = updates[field].strip()

    if "status" in updates and updates["status"] is None:
        raise ValidationException(f"status must be one of: {allowed_values(PlantStatus)}")

    plant = repo.update(plant, updates)
    logger.info("Plant updated", plant_id=plant.id, fields=sorted(updates))
    return plant


def delete_plant(repo: PlantRepository, plant_id: int) -> None:
    """Delete a plant; its QR tokens go with it."""
    plant = get_plant_or_404(repo, plant_id)
    repo.delete(plant)
    logger.info("Plant deleted", plant_id=plant_id)


def plant_summary(repo: PlantRepository) -> Dict[str, Any]:
    by_status = repo.count_by_status()
    return {"total": sum(by_status.values()), "byStatus": by_status}
