"""User domain model — maps to the 'users' table."""

from sqlalchemy import Column, Integer, String, DateTime, Enum as SAEnum
from sqlalchemy.sql import func

from snam_baitong.domain.enums import Role, UserStatus
from snam_baitong.infrastructure.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        SAEnum(Role, values_callable=lambda e: [m.value for m in e], name="user_role"),
        nullable=False,
        default=Role.MINISTRY,
    )
    status = Column(
        SAEnum(UserStatus, values_callable=lambda e: [m.value for m in e], name="user_status"),
        nullable=False,
        default=UserStatus.ACTIVE,
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<User {self.username} ({self.role.value if self.role else None})>"
