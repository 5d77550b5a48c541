"""Email Service for booking notifications.

Renders the HTML templates in ``app/templates/email`` and sends them
through the SendGrid v3 HTTP API.
"""

import html
import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Any
from uuid import UUID

import httpx

from app.config import settings
from app.events.booking_events import (
    BookingApproved,
    BookingCancelled,
    BookingCreated,
    BookingRejected,
)
from app.schemas.booking import cancel_url_for

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"
TEMPLATE_NAMES = ("confirmation", "pending", "approved", "rejected", "cancelled")

SENDGRID_URL = "https://api.sendgrid.com/v3/mail/send"

_PLACEHOLDER = re.compile(r"\{\{\s*\w+\s*\}\}")


class EmailDeliveryError(Exception):
    """SendGrid refused or could not be reached."""


class EmailTemplateLoader:
    """Loads every booking template once and fills ``{{Key}}`` placeholders."""

    def __init__(self, template_dir: Path = TEMPLATE_DIR) -> None:
        self._templates: dict[str, str] = {}
        for name in TEMPLATE_NAMES:
            path = template_dir / f"{name}.html"
            if not path.is_file():
                raise FileNotFoundError(f"Template file not found: {path}")
            self._templates[name] = path.read_text(encoding="utf-8")
            logger.debug("Loaded email template: %s", name)

    def render(self, name: str, placeholders: dict[str, str], escape: bool = True) -> str:
        """Fill a template.

        Values are HTML-escaped, except for keys ending in ``Section`` or
        ``Message`` which carry prebuilt markup.
        """
        try:
            template = self._templates[name]
        except KeyError:
            raise ValueError(f"Template '{name}' not found") from None

        for key, value in placeholders.items():
            if escape and not key.endswith(("Section", "Message")):
                value = html.escape(value)
            template = template.replace(f"{{{{{key}}}}}", value)

        leftover = _PLACEHOLDER.search(template)
        if leftover:
            logger.warning(
                "Template '%s' contains unreplaced placeholder: %s", name, leftover.group(0)
            )
        return template


def format_session_time(starts_at: datetime) -> str:
    """``Monday, March 02, 2026 at 6:30 PM``"""
    hour = starts_at.hour % 12 or 12
    return f"{starts_at:%A, %B %d, %Y} at {hour}:{starts_at:%M %p}"


class EmailService:
    """Sends one email per booking event."""

    def __init__(self, loader: EmailTemplateLoader | None = None) -> None:
        self.loader = loader or EmailTemplateLoader()
        self._http_client: httpx.AsyncClient | None = None

    @property
    def http_client(self) -> httpx.AsyncClient:
        """Lazy-load HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=30.0)
        return self._http_client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    # ==================== BOOKING EMAILS ====================

    async def send_booking_confirmation(self, event: BookingCreated) -> bool:
        if event.is_returning_customer:
            welcome = f"<p>Welcome back, {html.escape(event.first_name)}!</p>"
        else:
            welcome = f"<p>Hi {html.escape(event.first_name)},</p>"

        body = self.loader.render(
            "confirmation",
            {
                "WelcomeMessage": welcome,
                "FirstName": event.first_name,
                "SessionTitle": event.session_title,
                "StudioName": event.studio_name,
                "SessionDateTime": format_session_time(event.session_starts_at),
                "Duration": str(event.session_duration),
                "CancelUrl": cancel_url_for(event.cancel_token),
            },
        )
        return await self.send_email(
            event.email, f"Booking Confirmed - {event.session_title}", body, event.booking_id
        )

    async def send_booking_pending(self, event: BookingCreated) -> bool:
        body = self.loader.render(
            "pending",
            {
                "FirstName": event.first_name,
                "SessionTitle": event.session_title,
                "StudioName": event.studio_name,
                "SessionDateTime": format_session_time(event.session_starts_at),
                "Duration": str(event.session_duration),
            },
        )
        return await self.send_email(
            event.email, f"Booking Received - {event.session_title}", body, event.booking_id
        )

    async def send_booking_approved(self, event: BookingApproved) -> bool:
        body = self.loader.render(
            "approved",
            {
                "FirstName": event.first_name,
                "SessionTitle": event.session_title,
                "StudioName": event.studio_name,
                "SessionDateTime": format_session_time(event.session_starts_at),
                "Duration": str(event.session_duration),
                "CancelUrl": cancel_url_for(event.cancel_token),
            },
        )
        return await self.send_email(
            event.email, f"Booking Approved - {event.session_title}", body, event.booking_id
        )

    async def send_booking_rejected(self, event: BookingRejected) -> bool:
        reason_section = ""
        if event.reason and event.reason.strip():
            reason_section = f"<p><strong>Reason:</strong> {html.escape(event.reason)}</p>"

        body = self.loader.render(
            "rejected",
            {
                "FirstName": event.first_name,
                "SessionTitle": event.session_title,
                "StudioName": event.studio_name,
                "SessionDateTime": format_session_time(event.session_starts_at),
                "ReasonSection": reason_section,
            },
        )
        return await self.send_email(
            event.email, f"Booking Not Approved - {event.session_title}", body, event.booking_id
        )

    async def send_booking_cancelled(self, event: BookingCancelled) -> bool:
        body = self.loader.render(
            "cancelled",
            {
                "FirstName": event.first_name,
                "SessionTitle": event.session_title,
                "StudioName": event.studio_name,
                "SessionDateTime": format_session_time(event.session_starts_at),
            },
        )
        return await self.send_email(
            event.email, f"Booking Cancelled - {event.session_title}", body, event.booking_id
        )

    # ==================== SENDGRID ====================

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        booking_id: UUID | None = None,
    ) -> bool:
        """Send an email via SendGrid.

        Returns:
            bool: True if sent, False if skipped because no API key is set.

        Raises:
            EmailDeliveryError: SendGrid failed, so the caller can retry.
        """
        if not settings.sendgrid_api_key:
            logger.warning(
                "SendGrid API key not configured, skipping email '%s' for booking %s",
                subject,
                booking_id,
            )
            return False

        headers = {
            "Authorization": f"Bearer {settings.sendgrid_api_key}",
            "Content-Type": "application/json",
        }
        payload: dict[str, Any] = {
            "personalizations": [{"to": [{"email": to_email}]}],
            "from": {
                "email": settings.email_from_address,
                "name": settings.email_from_name,
            },
            "subject": subject,
            "content": [{"type": "text/html", "value": html_content}],
        }

        try:
            response = await self.http_client.post(SENDGRID_URL, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            logger.error(
                "Failed to send email to %s for booking %s. Subject: %s",
                to_email,
                booking_id,
                subject,
            )
            raise EmailDeliveryError(str(exc)) from exc

        if response.status_code not in (200, 202):
            logger.error(
                "SendGrid returned %s for %s (booking %s)",
                response.status_code,
                to_email,
                booking_id,
            )
            raise EmailDeliveryError(f"SendGrid returned {response.status_code}")

        logger.info("Email sent successfully to %s for booking %s", to_email, booking_id)
        return True
