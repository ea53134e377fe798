"""Pydantic schemas for QR tokens."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_serializer

from snam_baitong.domain.enums import QRTokenState
from snam_baitong.domain.schemas.common import MAX_ID, CamelModel, serialize_timestamp


class QRGenerateRequest(CamelModel):
    plant_id: Optional[int] = Field(None, ge=1, le=MAX_ID)
    expires_at: Optional[datetime] = None


class QRTokenRead(CamelModel):
    id: int
    plant_id: int
    token: str
    expires_at: datetime
    created_at: Optional[datetime] = None
    revoked_at: Optional[datetime] = None
    state: Optional[QRTokenState] = None

    @field_serializer("expires_at", "created_at", "revoked_at")
    def _timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return serialize_timestamp(value)
