"""Tests for customer cancellation rules."""

from datetime import UTC, datetime, timedelta

import pytest

from app.core.exceptions import InvalidTransition
from app.domain.cancellation_policy import as_utc, assert_customer_can_cancel, has_started

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=UTC)


class TestCustomerCancellation:
    def test_confirmed_future_session(self):
        assert_customer_can_cancel("confirmed", NOW + timedelta(hours=1), now=NOW)

    def test_session_started(self):
        with pytest.raises(InvalidTransition, match="already started"):
            assert_customer_can_cancel("confirmed", NOW, now=NOW)

    def test_pending_refused(self):
        with pytest.raises(InvalidTransition, match="contact the studio"):
            assert_customer_can_cancel("pending", NOW + timedelta(days=1), now=NOW)

    def test_rejected_refused(self):
        with pytest.raises(InvalidTransition):
            assert_customer_can_cancel("rejected", NOW + timedelta(days=1), now=NOW)


class TestTimeHelpers:
    def test_naive_datetimes_are_utc(self):
        naive = datetime(2026, 3, 2, 9, 0)
        assert as_utc(naive) == NOW

    def test_offset_datetimes_are_converted(self):
        from datetime import timezone

        local = datetime(2026, 3, 2, 10, 0, tzinfo=timezone(timedelta(hours=1)))
        assert as_utc(local) == NOW

    def test_has_started_with_naive_start(self):
        assert has_started(datetime(2026, 3, 2, 8, 59), now=NOW)
        assert not has_started(datetime(2026, 3, 2, 9, 1), now=NOW)
