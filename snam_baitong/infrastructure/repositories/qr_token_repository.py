"""
SQLAlchemy Implementation of QR Token Repository.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from snam_baitong.domain.models.qr_token import QRToken
from snam_baitong.domain.repositories.qr_token_repository import QRTokenRepository
from snam_baitong.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyQRTokenRepository(SQLAlchemyRepository[QRToken], QRTokenRepository):

    def __init__(self, db: Session):
        super().__init__(db, QRToken)

    def get_by_token(self, token: str) -> Optional[QRToken]:
        return self.db.query(QRToken).filter(QRToken.token == token).first()

    def list_for_plant(self, plant_id: int) -> List[QRToken]:
        return (
            self.db.query(QRToken)
            .filter(QRToken.plant_id == plant_id)
            .order_by(QRToken.created_at.desc(), QRToken.id.desc())
            .all()
        )

    def create(self, plant_id: int, token: str, expires_at: datetime) -> QRToken:
        return super().create({"plant_id": plant_id, "token": token, "expires_at": expires_at})

    def revoke(self, qr: QRToken, revoked_at: datetime) -> QRToken:
        return self.update(qr, {"revoked_at": revoked_at})
