"""
SQLAlchemy Implementation of Plant Repository.
"""

from typing import Dict

from sqlalchemy import func

from snam_baitong.domain.enums import PlantStatus
from snam_baitong.domain.models.plant import Plant
from snam_baitong.domain.repositories.plant_repository import PlantRepository
from snam_baitong.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyPlantRepository(SQLAlchemyRepository[Plant], PlantRepository):
    """Plant repository implementation using SQLAlchemy."""

    def count_by_status(self) -> Dict[str, int]:
        counts = {status.value: 0 for status in PlantStatus}
        rows = (
            self.db.query(Plant.status, func.count(Plant.id).label("count"))
            .group_by(Plant.status)
            .all()
        )
        for row in rows:
            counts[PlantStatus(row.status).value] = row.count
        return counts
