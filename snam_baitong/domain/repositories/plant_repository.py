"""
Plant Repository Interface.
"""

from typing import Dict

from snam_baitong.domain.repositories.base import BaseRepository
from snam_baitong.domain.models.plant import Plant


class PlantRepository(BaseRepository[Plant]):
    """Interface for Plant-specific operations."""

    def count_by_status(self) -> Dict[str, int]:
        """Number of plants per status value."""
        ...
