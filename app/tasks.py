"""Celery background tasks.

Booking notifications: every booking event published by the API ends up
here and is turned into one customer email.
"""

import asyncio
import logging
from typing import Any

from celery import shared_task
from pydantic import ValidationError

from app.events.handlers import process_event
from app.services.email_service import EmailService

logger = logging.getLogger(__name__)


def run_async(coro):
    """Run async function in sync context."""
    return asyncio.run(coro)


async def _process_booking_event(payload: dict[str, Any]) -> str:
    emails = EmailService()
    try:
        event = await process_event(payload, emails)
    finally:
        await emails.close()
    return event.event_type


# ==================== NOTIFICATION TASKS ====================


@shared_task(bind=True, max_retries=3)
def process_booking_event(self, payload: dict[str, Any]):
    """Send the notification email for a booking event.

    Malformed payloads are dropped; delivery failures are retried.
    """
    try:
        event_type = run_async(_process_booking_event(payload))
    except ValidationError:
        logger.exception("Dropping malformed booking event: %s", payload)
        return {"status": "error", "message": "Malformed booking event"}
    except Exception as exc:
        logger.warning(
            "Booking event %s failed (attempt %s), retrying",
            payload.get("event_type"),
            self.request.retries + 1,
        )
        raise self.retry(exc=exc, countdown=60)

    return {"status": "success", "event_type": event_type}
