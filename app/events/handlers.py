"""Event handlers - turn booking events from the queue into emails."""

import logging
from typing import Any, Awaitable, Callable, Dict

from app.domain.booking_state import BookingStatus
from app.events.booking_events import (
    BookingApproved,
    BookingCancelled,
    BookingCreated,
    BookingEvent,
    BookingRejected,
    booking_event_adapter,
)
from app.services.email_service import EmailService

logger = logging.getLogger(__name__)


async def handle_booking_created(event: BookingCreated, emails: EmailService) -> None:
    """Confirmation or 'received' email depending on the initial status."""
    if event.status == BookingStatus.CONFIRMED:
        await emails.send_booking_confirmation(event)
        logger.info("Sent booking confirmation for %s", event.booking_id)
    else:
        await emails.send_booking_pending(event)
        logger.info("Sent booking pending notice for %s", event.booking_id)


async def handle_booking_approved(event: BookingApproved, emails: EmailService) -> None:
    await emails.send_booking_approved(event)
    logger.info("Sent approval notice for %s", event.booking_id)


async def handle_booking_rejected(event: BookingRejected, emails: EmailService) -> None:
    await emails.send_booking_rejected(event)
    logger.info("Sent rejection notice for %s", event.booking_id)


async def handle_booking_cancelled(event: BookingCancelled, emails: EmailService) -> None:
    await emails.send_booking_cancelled(event)
    logger.info(
        "Sent cancellation notice for %s (cancelled by %s)", event.booking_id, event.cancelled_by
    )


# Registry of event type -> handler function
EVENT_HANDLERS: Dict[str, Callable[[Any, EmailService], Awaitable[None]]] = {
    "booking_created": handle_booking_created,
    "booking_approved": handle_booking_approved,
    "booking_rejected": handle_booking_rejected,
    "booking_cancelled": handle_booking_cancelled,
}


def parse_event(payload: dict[str, Any]) -> BookingEvent:
    return booking_event_adapter.validate_python(payload)


async def process_event(payload: dict[str, Any], emails: EmailService) -> BookingEvent:
    """Parse a queued payload and run its handler.

    Raises ``pydantic.ValidationError`` for payloads that are not a known
    booking event.
    """
    event = parse_event(payload)
    handler = EVENT_HANDLERS[event.event_type]
    await handler(event, emails)
    return event
