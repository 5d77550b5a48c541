"""Studio-related database models."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base

if TYPE_CHECKING:
    from app.models.booking import Booking
    from app.models.session import Session


def utcnow() -> datetime:
    return datetime.now(UTC)


class StudioStatus(str, Enum):
    ACTIVE = "active"
    SUSPENDED = "suspended"


class Studio(Base):
    """Studio (tenant) model."""

    __tablename__ = "studios"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)
    timezone: Mapped[str] = mapped_column(String(50), nullable=False)

    # Booking approval
    requires_approval: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    auto_approve_returning: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), default=StudioStatus.ACTIVE.value, nullable=False, index=True
    )  # active, suspended
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Relationships
    sessions: Mapped[list["Session"]] = relationship("Session", back_populates="studio")
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="studio")
    users: Mapped[list["StudioUser"]] = relationship("StudioUser", back_populates="studio")


class StudioUser(Base):
    """Staff account attached to a studio."""

    __tablename__ = "studio_users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    studio_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("studios.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    studio: Mapped["Studio"] = relationship("Studio", back_populates="users")
