"""Booking state machine.

States: pending → confirmed | rejected | cancelled, confirmed → cancelled.
Rejected and cancelled are terminal.
"""

from enum import Enum

from app.core.exceptions import InvalidTransition


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    CANCELLED = "cancelled"


class AttendanceStatus(str, Enum):
    """Attendance, independent of the booking status."""

    NOT_CHECKED_IN = "not_checked_in"
    PRESENT = "present"
    NO_SHOW = "no_show"


# Bookings in these states hold (or wait for) a spot in the session
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {
        BookingStatus.CONFIRMED,
        BookingStatus.REJECTED,
        BookingStatus.CANCELLED,
    },
    BookingStatus.CONFIRMED: {BookingStatus.CANCELLED},
    BookingStatus.REJECTED: set(),
    BookingStatus.CANCELLED: set(),
}


def assert_booking_transition(current: str, target: str) -> None:
    current_status = BookingStatus(current)
    target_status = BookingStatus(target)
    allowed = BOOKING_TRANSITIONS.get(current_status, set())
    if target_status not in allowed:
        raise InvalidTransition(
            f"Invalid booking transition: {current_status.value} → {target_status.value}"
        )


def is_repeat_of_terminal(current: str, target: str) -> bool:
    """True when ``target`` was already reached, making the action a no-op."""
    return BookingStatus(current) == BookingStatus(target)


def decide_initial_status(
    requires_approval: bool,
    auto_approve_returning: bool,
    is_returning_customer: bool,
) -> BookingStatus:
    """Pick the status a newly admitted booking starts in."""
    if not requires_approval:
        return BookingStatus.CONFIRMED
    if auto_approve_returning and is_returning_customer:
        return BookingStatus.CONFIRMED
    return BookingStatus.PENDING


def status_message(status: str) -> str:
    if BookingStatus(status) == BookingStatus.PENDING:
        return (
            "Booking received! The studio will review your request "
            "and you will receive an email once it is approved."
        )
    return "Booking confirmed! You will receive a confirmation email shortly."
