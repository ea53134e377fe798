"""Pydantic schemas for User and Auth."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, Field, field_serializer

from snam_baitong.domain.enums import Role, UserStatus
from snam_baitong.domain.schemas.common import CamelModel, serialize_timestamp


class UserCreate(CamelModel):
    username: Optional[str] = Field(None, validation_alias=AliasChoices("username", "identity"))
    password: Optional[str] = None
    role: Optional[Role] = None


class UserUpdate(CamelModel):
    password: Optional[str] = None
    role: Optional[Role] = None
    status: Optional[UserStatus] = None


class UserRead(CamelModel):
    id: int
    username: str
    role: Role
    status: UserStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("created_at", "updated_at")
    def _timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return serialize_timestamp(value)


class LoginRequest(CamelModel):
    username: Optional[str] = Field(None, validation_alias=AliasChoices("username", "identity"))
    password: Optional[str] = None


@dataclass(frozen=True)
class Identity:
    """Caller identity attached to a request by the authentication gate."""
    id: int
    username: str
    role: Role
    token_id: str
