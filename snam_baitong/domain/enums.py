"""Closed value sets shared by models and schemas."""

from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    MINISTRY = "ministry"


class UserStatus(str, Enum):
    ACTIVE = "active"
    DISABLED = "disabled"


class PlantStatus(str, Enum):
    WELL_PLANTED = "well_planted"
    NOT_PLANTED = "not_planted"
    DIED = "died"


class QRTokenState(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    REVOKED = "revoked"


def allowed_values(enum_cls) -> str:
    return ", ".join(member.value for member in enum_cls)
