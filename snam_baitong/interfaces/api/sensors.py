"""Sensors and dashboard API — latest snapshot and crop overview."""

from fastapi import APIRouter, Depends

from snam_baitong.application.services.plant_service import plant_summary
from snam_baitong.application.services.sensor_service import (
    compute_plant_status,
    fetch_latest_snapshot,
    try_fetch_latest_snapshot,
)
from snam_baitong.domain.repositories.plant_repository import PlantRepository
from snam_baitong.domain.schemas.auth import Identity
from snam_baitong.infrastructure.timeseries import SensorReader
from snam_baitong.interfaces.api.deps import get_current_identity
from snam_baitong.interfaces.deps import get_plant_repository, get_sensor_reader

router = APIRouter(tags=["Sensors"])


@router.get("/api/sensors/latest")
def latest_sensors(
    reader: SensorReader = Depends(get_sensor_reader),
    identity: Identity = Depends(get_current_identity),
):
    return {"success": True, "data": fetch_latest_snapshot(reader)}


@router.get("/api/dashboard")
def dashboard(
    repo: PlantRepository = Depends(get_plant_repository),
    reader: SensorReader = Depends(get_sensor_reader),
    identity: Identity = Depends(get_current_identity),
):
    # A sensor outage still leaves the plant counts visible.
    snapshot = try_fetch_latest_snapshot(reader)
    readings = snapshot["readings"] if snapshot else {}
    return {
        "success": True,
        "data": {
            "plants": plant_summary(repo),
            "latestSensors": snapshot,
            "status": compute_plant_status(readings),
        },
    }
