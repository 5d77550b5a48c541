"""Tests for the booking state machine."""

import pytest

from app.core.exceptions import InvalidTransition
from app.domain.booking_state import (
    BookingStatus,
    assert_booking_transition,
    decide_initial_status,
    is_repeat_of_terminal,
    status_message,
)


class TestBookingTransitions:
    """Allowed and refused status transitions."""

    @pytest.mark.parametrize(
        "current,target",
        [
            ("pending", "confirmed"),
            ("pending", "rejected"),
            ("pending", "cancelled"),
            ("confirmed", "cancelled"),
        ],
    )
    def test_allowed(self, current, target):
        assert_booking_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            ("confirmed", "rejected"),
            ("confirmed", "pending"),
            ("rejected", "confirmed"),
            ("rejected", "cancelled"),
            ("cancelled", "confirmed"),
            ("cancelled", "rejected"),
        ],
    )
    def test_refused(self, current, target):
        with pytest.raises(InvalidTransition) as exc_info:
            assert_booking_transition(current, target)
        assert exc_info.value.status_code == 400
        assert current in exc_info.value.detail

    def test_repeat_detection(self):
        assert is_repeat_of_terminal("cancelled", BookingStatus.CANCELLED)
        assert is_repeat_of_terminal("confirmed", "confirmed")
        assert not is_repeat_of_terminal("pending", "confirmed")


class TestInitialStatus:
    """Which status a new booking starts in."""

    def test_no_approval_needed_confirms(self):
        assert decide_initial_status(False, False, False) == BookingStatus.CONFIRMED
        assert decide_initial_status(False, True, True) == BookingStatus.CONFIRMED

    def test_returning_customer_auto_approved(self):
        assert decide_initial_status(True, True, True) == BookingStatus.CONFIRMED

    def test_new_customer_waits_for_approval(self):
        assert decide_initial_status(True, True, False) == BookingStatus.PENDING

    def test_auto_approve_disabled(self):
        assert decide_initial_status(True, False, True) == BookingStatus.PENDING

    def test_messages(self):
        assert status_message("pending").startswith("Booking received!")
        assert status_message(BookingStatus.CONFIRMED).startswith("Booking confirmed!")
