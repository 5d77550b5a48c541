"""Tests for the notification task and the event publishers."""

import asyncio
import threading
import time
import uuid
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import BackgroundTasks

from app.events.booking_events import BookingCancelled
from app.events.publisher import BackgroundEventPublisher, CeleryEventPublisher
from app.tasks import process_booking_event
from app.worker import celery_app
from helpers import FailingPublisher


def cancelled_event() -> BookingCancelled:
    return BookingCancelled(
        booking_id=uuid.uuid4(),
        first_name="Jane",
        last_name="Doe",
        email="jane@example.com",
        session_title="Morning Flow",
        session_starts_at=datetime(2026, 3, 2, 9, 0, tzinfo=UTC),
        studio_name="Lotus Studio",
        cancelled_by="customer",
    )


class TestProcessBookingEvent:
    def test_sends_email_for_event(self):
        emails = AsyncMock()
        with patch("app.tasks.EmailService", return_value=emails):
            result = process_booking_event.apply(
                args=[cancelled_event().model_dump(mode="json")]
            ).get()

        assert result == {"status": "success", "event_type": "booking_cancelled"}
        emails.send_booking_cancelled.assert_awaited_once()
        emails.close.assert_awaited_once()

    def test_malformed_payload_is_dropped(self):
        emails = AsyncMock()
        with patch("app.tasks.EmailService", return_value=emails):
            result = process_booking_event.apply(args=[{"event_type": "nope"}]).get()

        assert result["status"] == "error"
        emails.send_booking_cancelled.assert_not_awaited()


class TestCeleryEventPublisher:
    def test_queues_json_payload(self):
        task = MagicMock()
        event = cancelled_event()
        with patch("app.tasks.process_booking_event", task):
            CeleryEventPublisher().publish(event)

        task.apply_async.assert_called_once()
        kwargs = task.apply_async.call_args.kwargs
        assert kwargs["queue"] == "booking-notifications"
        assert kwargs["args"][0]["event_type"] == "booking_cancelled"
        assert kwargs["args"][0]["booking_id"] == str(event.booking_id)
        assert kwargs["retry"] is False

    def test_broker_failure_is_swallowed(self):
        task = MagicMock()
        task.apply_async.side_effect = ConnectionError("redis down")
        with patch("app.tasks.process_booking_event", task):
            CeleryEventPublisher().publish(cancelled_event())

        task.apply_async.assert_called_once()

    def test_broker_connect_fails_fast(self):
        assert celery_app.conf.broker_connection_timeout == 2.0
        assert celery_app.conf.broker_transport_options["socket_connect_timeout"] == 2.0


class SlowPublisher:
    """Blocks like a publisher waiting on an unreachable broker."""

    def __init__(self, delay: float = 0.2) -> None:
        self.delay = delay
        self.events = []
        self.threads = []

    def publish(self, event) -> None:
        time.sleep(self.delay)
        self.threads.append(threading.get_ident())
        self.events.append(event)


class TestBackgroundEventPublisher:
    @pytest.mark.asyncio
    async def test_publish_returns_before_sending(self):
        tasks = BackgroundTasks()
        slow = SlowPublisher()

        started = time.perf_counter()
        BackgroundEventPublisher(tasks, slow).publish(cancelled_event())

        assert time.perf_counter() - started < 0.1
        assert slow.events == []

        ticks = 0

        async def keep_serving():
            nonlocal ticks
            while not slow.events:
                ticks += 1
                await asyncio.sleep(0.01)

        await asyncio.gather(tasks(), keep_serving())

        assert len(slow.events) == 1
        assert slow.threads[0] != threading.get_ident()
        assert ticks > 1

    @pytest.mark.asyncio
    async def test_publisher_error_is_logged_not_raised(self):
        tasks = BackgroundTasks()
        failing = FailingPublisher()

        BackgroundEventPublisher(tasks, failing).publish(cancelled_event())
        await tasks()

        assert failing.attempts == 1
