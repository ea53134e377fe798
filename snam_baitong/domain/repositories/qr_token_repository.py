"""
QR Token Repository Interface.
"""

from datetime import datetime
from typing import List, Optional, Protocol

from snam_baitong.domain.models.qr_token import QRToken


class QRTokenRepository(Protocol):
    """Interface for QR token storage. The token column is unique."""

    def get_by_token(self, token: str) -> Optional[QRToken]:
        ...

    def list_for_plant(self, plant_id: int) -> List[QRToken]:
        ...

    def create(self, plant_id: int, token: str, expires_at: datetime) -> QRToken:
        """Insert a token; raises ConflictException when the value already exists."""
        ...

    def revoke(self, qr: QRToken, revoked_at: datetime) -> QRToken:
        ...
