"""
SQLAlchemy Implementation of User Repository.
"""

from typing import Optional

from snam_baitong.domain.enums import Role
from snam_baitong.domain.models.user import User
from snam_baitong.domain.repositories.user_repository import UserRepository
from snam_baitong.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_username(self, username: str) -> Optional[User]:
        return self.db.query(User).filter(User.username == username).first()

    def has_admin(self) -> bool:
        return self.db.query(User.id).filter(User.role == Role.ADMIN).first() is not None
