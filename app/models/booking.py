"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base
from app.domain.booking_state import AttendanceStatus, BookingStatus
from app.models.studio import utcnow

if TYPE_CHECKING:
    from app.models.session import Session
    from app.models.studio import Studio

# One pending/confirmed booking per (session, email). Cancelled and rejected
# rows are kept, so the index must be partial.
ACTIVE_BOOKING_PREDICATE = text("status IN ('pending', 'confirmed')")


class Booking(Base):
    """A customer's reservation against a session."""

    __tablename__ = "bookings"
    __table_args__ = (
        Index(
            "uq_bookings_active_session_email",
            "session_id",
            "email",
            unique=True,
            postgresql_where=ACTIVE_BOOKING_PREDICATE,
            sqlite_where=ACTIVE_BOOKING_PREDICATE,
        ),
        Index("ix_bookings_studio_id_email", "studio_id", "email"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    studio_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("studios.id", ondelete="RESTRICT"), nullable=False
    )
    session_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("sessions.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    # Customer
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)  # trimmed, lowercase
    phone: Mapped[str | None] = mapped_column(String(20))

    cancel_token: Mapped[uuid.UUID] = mapped_column(
        Uuid, unique=True, nullable=False, default=uuid.uuid4, index=True
    )

    # Status
    status: Mapped[str] = mapped_column(
        String(20), default=BookingStatus.CONFIRMED.value, nullable=False, index=True
    )  # pending, confirmed, rejected, cancelled
    attendance_status: Mapped[str] = mapped_column(
        String(20), default=AttendanceStatus.NOT_CHECKED_IN.value, nullable=False
    )  # not_checked_in, present, no_show

    # Decisions
    decided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    rejection_reason: Mapped[str | None] = mapped_column(Text)
    cancelled_by: Mapped[str | None] = mapped_column(String(10))  # customer, studio
    cancellation_reason: Mapped[str | None] = mapped_column(Text)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )

    # Relationships
    studio: Mapped["Studio"] = relationship("Studio", back_populates="bookings")
    session: Mapped["Session"] = relationship("Session", back_populates="bookings")
