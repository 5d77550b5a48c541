"""Session (scheduled class) database model."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.models.studio import utcnow

if TYPE_CHECKING:
    from app.models.booking import Booking
    from app.models.studio import Studio


class SessionStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class Session(Base):
    """A scheduled class with a fixed number of spots."""

    __tablename__ = "sessions"
    __table_args__ = (Index("ix_sessions_studio_id_starts_at", "studio_id", "starts_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    studio_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("studios.id", ondelete="RESTRICT"), nullable=False
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    starts_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=SessionStatus.ACTIVE.value, nullable=False, index=True
    )  # active, cancelled
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # Relationships
    studio: Mapped["Studio"] = relationship("Studio", back_populates="sessions")
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="session")
