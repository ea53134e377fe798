"""
User Repository Interface.
"""

from typing import Optional

from snam_baitong.domain.repositories.base import BaseRepository
from snam_baitong.domain.models.user import User


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_username(self, username: str) -> Optional[User]:
        ...

    def has_admin(self) -> bool:
        """True when at least one admin account exists."""
        ...
