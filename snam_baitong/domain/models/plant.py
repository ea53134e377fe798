"""Plant domain model — maps to the 'plants' table."""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from snam_baitong.domain.enums import PlantStatus
from snam_baitong.infrastructure.database import Base


class Plant(Base):
    __tablename__ = "plants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    farmer_image_url = Column(Text, nullable=True)
    farm_location = Column(String(255), nullable=False)
    plant_name = Column(String(255), nullable=False)
    planted_date = Column(Date, nullable=True)
    harvest_date = Column(Date, nullable=True)
    status = Column(
        SAEnum(PlantStatus, values_callable=lambda e: [m.value for m in e], name="plant_status"),
        nullable=False,
        default=PlantStatus.WELL_PLANTED,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    qr_tokens = relationship(
        "QRToken",
        back_populates="plant",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Plant {self.id} - {self.plant_name}>"
