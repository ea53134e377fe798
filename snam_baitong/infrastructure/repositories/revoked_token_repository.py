"""
SQLAlchemy Implementation of the Revocation List.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from snam_baitong.core.clock import utcnow
from snam_baitong.core.exceptions import ConflictException
from snam_baitong.domain.models.revoked_token import RevokedToken
from snam_baitong.domain.repositories.revoked_token_repository import RevokedTokenRepository
from snam_baitong.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyRevokedTokenRepository(SQLAlchemyRepository[RevokedToken], RevokedTokenRepository):

    def __init__(self, db: Session):
        super().__init__(db, RevokedToken)

    def add(self, jti: str, expires_at: datetime, user_id: Optional[int] = None) -> None:
        if self.is_revoked(jti):
            return
        try:
            self.create({"jti": jti, "expires_at": expires_at, "user_id": user_id, "revoked_at": utcnow()})
        except ConflictException:
            # Either a concurrent logout won the race or the owner row is gone.
            if user_id is not None and not self.is_revoked(jti):
                self.create({"jti": jti, "expires_at": expires_at, "user_id": None, "revoked_at": utcnow()})

    def is_revoked(self, jti: str) -> bool:
        return self.db.query(RevokedToken.id).filter(RevokedToken.jti == jti).first() is not None

    def purge_expired(self, now: datetime) -> int:
        deleted = (
            self.db.query(RevokedToken)
            .filter(RevokedToken.expires_at < now)
            .delete(synchronize_session=False)
        )
        self._commit("purge revoked tokens")
        return deleted
