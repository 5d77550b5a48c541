"""Event publisher - queues booking events for background notification."""

import logging
from typing import Protocol

from fastapi import BackgroundTasks

from app.config import settings
from app.events.booking_events import BookingEvent

logger = logging.getLogger(__name__)


class EventPublisher(Protocol):
    """One-way channel for booking events."""

    def publish(self, event: BookingEvent) -> None:
        ...


class CeleryEventPublisher:
    """Publishes events to the Celery notification queue.

    Publishing is best-effort: the booking row is already committed when
    this runs, so a broker failure is logged and otherwise ignored.
    """

    def publish(self, event: BookingEvent) -> None:
        from app.tasks import process_booking_event
        from app.worker import celery_app  # noqa: F401  configures the broker

        try:
            process_booking_event.apply_async(
                args=[event.model_dump(mode="json")],
                queue=settings.notification_queue,
                retry=False,
            )
        except Exception:
            logger.exception(
                "Failed to publish %s for booking %s", event.event_type, event.booking_id
            )
            return
        logger.info("Published %s for booking %s", event.event_type, event.booking_id)


class BackgroundEventPublisher:
    """Defers publishing until the response has been sent.

    Queued calls run in the threadpool after the request, so a slow or
    unreachable broker never holds up the event loop or the response.
    """

    def __init__(self, background_tasks: BackgroundTasks, publisher: EventPublisher) -> None:
        self.background_tasks = background_tasks
        self.publisher = publisher

    def publish(self, event: BookingEvent) -> None:
        self.background_tasks.add_task(self._send, event)

    def _send(self, event: BookingEvent) -> None:
        try:
            self.publisher.publish(event)
        except Exception:
            logger.exception(
                "Event %s for booking %s was not published", event.event_type, event.booking_id
            )


event_publisher = CeleryEventPublisher()
