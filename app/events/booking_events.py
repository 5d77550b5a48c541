"""Booking domain events.

Every event is self-contained: the notification consumer renders emails
from the payload alone and never reads the database.
"""

from datetime import UTC, datetime
from typing import Annotated, Literal, Union
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter

from app.domain.booking_state import BookingStatus
from app.models.booking import Booking
from app.models.session import Session
from app.models.studio import Studio


def _now() -> datetime:
    return datetime.now(UTC)


class _BookingEventBase(BaseModel):
    booking_id: UUID
    occurred_at: datetime = Field(default_factory=_now)

    # Customer
    first_name: str
    last_name: str
    email: str

    # Session / studio
    session_title: str
    session_starts_at: datetime
    studio_name: str


class BookingCreated(_BookingEventBase):
    """Fired after a booking is admitted (confirmed or pending)."""

    event_type: Literal["booking_created"] = "booking_created"
    phone: str | None = None
    session_id: UUID
    session_duration: int
    status: BookingStatus
    cancel_token: UUID
    is_returning_customer: bool


class BookingApproved(_BookingEventBase):
    """Fired after the studio approves a pending booking."""

    event_type: Literal["booking_approved"] = "booking_approved"
    session_duration: int
    cancel_token: UUID


class BookingRejected(_BookingEventBase):
    """Fired after the studio rejects a pending booking."""

    event_type: Literal["booking_rejected"] = "booking_rejected"
    reason: str | None = None


class BookingCancelled(_BookingEventBase):
    """Fired after a booking is cancelled by the customer or the studio."""

    event_type: Literal["booking_cancelled"] = "booking_cancelled"
    cancelled_by: str  # 'customer' or 'studio'
    reason: str | None = None


BookingEvent = Annotated[
    Union[BookingCreated, BookingApproved, BookingRejected, BookingCancelled],
    Field(discriminator="event_type"),
]

booking_event_adapter: TypeAdapter[BookingEvent] = TypeAdapter(BookingEvent)


def _common(booking: Booking, session: Session, studio: Studio) -> dict:
    return {
        "booking_id": booking.id,
        "first_name": booking.first_name,
        "last_name": booking.last_name,
        "email": booking.email,
        "session_title": session.title,
        "session_starts_at": session.starts_at,
        "studio_name": studio.name,
    }


def booking_created(
    booking: Booking,
    session: Session,
    studio: Studio,
    is_returning_customer: bool,
) -> BookingCreated:
    return BookingCreated(
        **_common(booking, session, studio),
        phone=booking.phone,
        session_id=session.id,
        session_duration=session.duration_minutes,
        status=BookingStatus(booking.status),
        cancel_token=booking.cancel_token,
        is_returning_customer=is_returning_customer,
    )


def booking_approved(booking: Booking, session: Session, studio: Studio) -> BookingApproved:
    return BookingApproved(
        **_common(booking, session, studio),
        session_duration=session.duration_minutes,
        cancel_token=booking.cancel_token,
    )


def booking_rejected(
    booking: Booking, session: Session, studio: Studio, reason: str | None
) -> BookingRejected:
    return BookingRejected(**_common(booking, session, studio), reason=reason)


def booking_cancelled(
    booking: Booking,
    session: Session,
    studio: Studio,
    cancelled_by: str,
    reason: str | None = None,
) -> BookingCancelled:
    return BookingCancelled(
        **_common(booking, session, studio),
        cancelled_by=cancelled_by,
        reason=reason,
    )
