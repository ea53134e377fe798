"""Shared pydantic bases for the camelCase JSON contract."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from snam_baitong.core.clock import isoformat_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, mode="json")


def blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


def serialize_timestamp(value: Optional[datetime]) -> Optional[str]:
    return isoformat_utc(value)


# Largest value a BIGINT primary key can hold; bigger path ids cannot match a row.
MAX_ID = 2 ** 63 - 1
