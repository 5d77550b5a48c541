"""Cancellation rules for customer self-service cancellation.

A customer holding a cancel link may cancel a confirmed booking as long
as the session has not started. Pending bookings are withdrawn by the
studio only (reject or studio cancellation).
"""

from datetime import UTC, datetime

from app.core.exceptions import InvalidTransition
from app.domain.booking_state import BookingStatus


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (all stored times are UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def has_started(starts_at: datetime, now: datetime | None = None) -> bool:
    now = now or datetime.now(UTC)
    return as_utc(starts_at) <= as_utc(now)


def assert_customer_can_cancel(
    status: str,
    starts_at: datetime,
    now: datetime | None = None,
) -> None:
    """Validate a customer cancellation by token.

    Args:
        status: Current booking status (never ``cancelled`` here, the
            caller answers repeats idempotently before asking)
        starts_at: Session start time
        now: Reference time, defaults to the current UTC time

    Raises:
        InvalidTransition: If the booking cannot be cancelled by the customer
    """
    current = BookingStatus(status)
    if current == BookingStatus.PENDING:
        raise InvalidTransition(
            "Pending bookings cannot be cancelled by the customer. "
            "Please contact the studio."
        )
    if current != BookingStatus.CONFIRMED:
        raise InvalidTransition(f"Cannot cancel a {current.value} booking")
    if has_started(starts_at, now):
        raise InvalidTransition("Cannot cancel - session has already started")
