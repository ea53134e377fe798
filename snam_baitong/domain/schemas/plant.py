"""Pydantic schemas for Plant domain."""

from datetime import date, datetime
from typing import Optional

from pydantic import Field, field_serializer, field_validator

from snam_baitong.domain.enums import PlantStatus
from snam_baitong.domain.schemas.common import CamelModel, blank_to_none, serialize_timestamp


class PlantFields(CamelModel):
    farmer_image_url: Optional[str] = Field(None, alias="farmerImage")
    farm_location: Optional[str] = None
    plant_name: Optional[str] = None
    planted_date: Optional[date] = None
    harvest_date: Optional[date] = None
    status: Optional[PlantStatus] = None

    @field_validator("planted_date", "harvest_date", "farmer_image_url", mode="before")
    @classmethod
    def _blank_is_null(cls, v):
        return blank_to_none(v)


class PlantCreate(PlantFields):
    pass


class PlantUpdate(PlantFields):
    pass


class PlantRead(CamelModel):
    id: int
    farmer_image_url: Optional[str] = Field(None, alias="farmerImage")
    farm_location: str
    plant_name: str
    planted_date: Optional[date] = None
    harvest_date: Optional[date] = None
    status: PlantStatus = PlantStatus.WELL_PLANTED
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer("created_at", "updated_at")
    def _timestamps(self, value: Optional[datetime]) -> Optional[str]:
        return serialize_timestamp(value)
