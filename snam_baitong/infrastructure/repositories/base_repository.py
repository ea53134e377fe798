"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from snam_baitong.core.exceptions import ConflictException, UpstreamServiceException
from snam_baitong.domain.repositories.base import BaseRepository
from snam_baitong.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


def _as_dict(obj_in: Any) -> Dict[str, Any]:
    if hasattr(obj_in, "model_dump"):
        return obj_in.model_dump(exclude_unset=True)
    return dict(obj_in)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def _commit(self, action: str) -> None:
        """Commit, translating driver errors into application errors."""
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictException(f"Duplicate key while trying to {action}") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise UpstreamServiceException("Database operation failed") from e

    def get_by_id(self, id: int) -> Optional[ModelType]:
        return self.db.get(self.model, id)

    def list(self) -> List[ModelType]:
        return (
            self.db.query(self.model)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
            .all()
        )

    def create(self, obj_in: Any) -> ModelType:
        db_obj = self.model(**_as_dict(obj_in))
        self.db.add(db_obj)
        self._commit(f"create {self.model.__tablename__}")
        self.db.refresh(db_obj)
        return db_obj

    def update(self, db_obj: ModelType, obj_in: Any) -> ModelType:
        for field, value in _as_dict(obj_in).items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self.db.add(db_obj)
        self._commit(f"update {self.model.__tablename__}")
        self.db.refresh(db_obj)
        return db_obj

    def delete(self, db_obj: ModelType) -> None:
        self.db.delete(db_obj)
        self._commit(f"delete {self.model.__tablename__}")
