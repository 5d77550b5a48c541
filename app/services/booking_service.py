"""Booking service - admission and status transitions.

Each public method is one unit of work: it reads through the repository,
applies the booking rules, commits, and only then publishes the matching
event. Publication never affects the outcome.
"""

import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CapacityExceeded, DuplicateBooking, NotFoundError
from app.domain.booking_state import (
    ACTIVE_BOOKING_STATUSES,
    AttendanceStatus,
    BookingStatus,
    assert_booking_transition,
    decide_initial_status,
    is_repeat_of_terminal,
    status_message,
)
from app.domain.cancellation_policy import assert_customer_can_cancel
from app.events import booking_events
from app.events.booking_events import BookingEvent
from app.events.publisher import EventPublisher
from app.models.booking import Booking
from app.models.session import Session
from app.models.studio import Studio
from app.repositories.booking_repository import BookingRepository
from app.schemas.booking import BookingCreate
from app.utils.validators import normalize_email, normalize_phone

logger = logging.getLogger(__name__)


@dataclass
class AdmissionResult:
    booking: Booking
    session: Session
    studio: Studio
    spots_left: int
    is_returning_customer: bool
    message: str


@dataclass
class TransitionResult:
    booking: Booking
    already_applied: bool = False


class BookingService:
    """Service layer for the booking flow."""

    def __init__(self, db: AsyncSession, publisher: EventPublisher) -> None:
        self.repo = BookingRepository(db)
        self.publisher = publisher

    def _publish(self, event: BookingEvent) -> None:
        try:
            self.publisher.publish(event)
        except Exception:
            logger.exception(
                "Event %s for booking %s was not published", event.event_type, event.booking_id
            )

    async def create_booking(self, data: BookingCreate) -> AdmissionResult:
        """Admit a customer into a session."""
        email = normalize_email(data.email)
        logger.info(f"Creating booking for session {data.session_id}, email {email}")

        session = await self.repo.get_active_session_for_update(data.session_id)
        if session is None:
            logger.warning(f"Session {data.session_id} not found or cancelled")
            raise NotFoundError("Session not found or cancelled")

        # Pending bookings hold a spot until the studio decides
        prior_count = await self.repo.count_bookings(session.id, ACTIVE_BOOKING_STATUSES)
        if prior_count >= session.capacity:
            logger.warning(
                f"Session {session.id} is full ({prior_count}/{session.capacity})"
            )
            raise CapacityExceeded(capacity=session.capacity, booked=prior_count)

        if await self.repo.has_active_booking(session.id, email):
            logger.warning(f"Email {email} already booked session {session.id}")
            raise DuplicateBooking()

        studio = session.studio
        is_returning = await self.repo.is_returning_customer(studio.id, email)
        status = decide_initial_status(
            requires_approval=studio.requires_approval,
            auto_approve_returning=studio.auto_approve_returning,
            is_returning_customer=is_returning,
        )

        now = datetime.now(UTC)
        booking = Booking(
            id=uuid.uuid4(),
            studio_id=studio.id,
            session_id=session.id,
            first_name=data.first_name,
            last_name=data.last_name,
            email=email,
            phone=normalize_phone(data.phone),
            status=status.value,
            cancel_token=uuid.uuid4(),
            attendance_status=AttendanceStatus.NOT_CHECKED_IN.value,
            decided_at=now if status == BookingStatus.CONFIRMED else None,
            created_at=now,
        )
        try:
            await self.repo.add(booking)
            await self.repo.commit()
        except IntegrityError:
            # Lost a race against a concurrent booking for the same email
            await self.repo.rollback()
            logger.warning(
                f"Email {email} already booked session {data.session_id} (constraint)"
            )
            raise DuplicateBooking()

        logger.info(
            f"Booking {booking.id} created with status {status.value} "
            f"(returning customer: {is_returning})"
        )
        self._publish(booking_events.booking_created(booking, session, studio, is_returning))

        return AdmissionResult(
            booking=booking,
            session=session,
            studio=studio,
            spots_left=session.capacity - prior_count - 1,
            is_returning_customer=is_returning,
            message=status_message(status),
        )

    async def get_booking(self, booking_id: UUID) -> Booking:
        booking = await self.repo.get(booking_id)
        if booking is None:
            logger.warning(f"Booking {booking_id} not found")
            raise NotFoundError("Booking not found")
        return booking

    async def list_bookings(
        self,
        session_id: UUID | None = None,
        email: str | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        normalized = email.strip().lower() if email else None
        return await self.repo.list_bookings(session_id=session_id, email=normalized, status=status)

    async def _get_for_update(self, booking_id: UUID) -> Booking:
        booking = await self.repo.get(booking_id, for_update=True)
        if booking is None:
            logger.warning(f"Booking {booking_id} not found")
            raise NotFoundError("Booking not found")
        return booking

    async def approve(self, booking_id: UUID) -> TransitionResult:
        """Approve a pending booking if the session still has a free spot."""
        booking = await self._get_for_update(booking_id)
        if is_repeat_of_terminal(booking.status, BookingStatus.CONFIRMED):
            logger.info(f"Booking {booking_id} already approved")
            return TransitionResult(booking, already_applied=True)

        assert_booking_transition(booking.status, BookingStatus.CONFIRMED)

        session = booking.session
        confirmed = await self.repo.count_bookings(session.id, [BookingStatus.CONFIRMED])
        if confirmed >= session.capacity:
            logger.warning(
                f"Cannot approve booking {booking_id}: session {session.id} is full"
            )
            raise CapacityExceeded(capacity=session.capacity, booked=confirmed)

        booking.status = BookingStatus.CONFIRMED.value
        booking.decided_at = datetime.now(UTC)
        await self.repo.commit()

        logger.info(f"Booking {booking_id} approved")
        self._publish(booking_events.booking_approved(booking, session, booking.studio))
        return TransitionResult(booking)

    async def reject(self, booking_id: UUID, reason: str | None = None) -> TransitionResult:
        """Reject a pending booking."""
        booking = await self._get_for_update(booking_id)
        if is_repeat_of_terminal(booking.status, BookingStatus.REJECTED):
            logger.info(f"Booking {booking_id} already rejected")
            return TransitionResult(booking, already_applied=True)

        assert_booking_transition(booking.status, BookingStatus.REJECTED)

        booking.status = BookingStatus.REJECTED.value
        booking.rejection_reason = reason
        booking.decided_at = datetime.now(UTC)
        await self.repo.commit()

        logger.info(f"Booking {booking_id} rejected")
        self._publish(
            booking_events.booking_rejected(booking, booking.session, booking.studio, reason)
        )
        return TransitionResult(booking)

    async def cancel_by_token(self, token: UUID) -> TransitionResult:
        """Customer cancellation through the emailed link."""
        booking = await self.repo.get_by_cancel_token(token)
        if booking is None:
            logger.warning(f"Booking with token {token} not found")
            raise NotFoundError("Invalid cancellation link")

        if is_repeat_of_terminal(booking.status, BookingStatus.CANCELLED):
            logger.info(f"Booking {booking.id} already cancelled")
            return TransitionResult(booking, already_applied=True)

        assert_customer_can_cancel(booking.status, booking.session.starts_at)

        self._mark_cancelled(booking, cancelled_by="customer")
        await self.repo.commit()

        logger.info(f"Booking {booking.id} cancelled by customer")
        self._publish(
            booking_events.booking_cancelled(
                booking, booking.session, booking.studio, cancelled_by="customer"
            )
        )
        return TransitionResult(booking)

    async def cancel_by_studio(
        self, booking_id: UUID, reason: str | None = None
    ) -> TransitionResult:
        """Studio cancellation of a pending or confirmed booking."""
        booking = await self._get_for_update(booking_id)
        if is_repeat_of_terminal(booking.status, BookingStatus.CANCELLED):
            logger.info(f"Booking {booking_id} already cancelled")
            return TransitionResult(booking, already_applied=True)

        assert_booking_transition(booking.status, BookingStatus.CANCELLED)

        self._mark_cancelled(booking, cancelled_by="studio", reason=reason)
        await self.repo.commit()

        logger.info(f"Booking {booking_id} cancelled by studio")
        self._publish(
            booking_events.booking_cancelled(
                booking, booking.session, booking.studio, cancelled_by="studio", reason=reason
            )
        )
        return TransitionResult(booking)

    async def update_attendance(self, booking_id: UUID, attendance: AttendanceStatus) -> Booking:
        """Record attendance on any booking that is not cancelled."""
        booking = await self.repo.get(booking_id, for_update=True)
        if booking is None or booking.status == BookingStatus.CANCELLED.value:
            logger.warning(f"Booking {booking_id} not found or cancelled")
            raise NotFoundError("Booking not found or cancelled")

        booking.attendance_status = attendance.value
        await self.repo.commit()

        logger.info(f"Attendance for booking {booking_id} set to {attendance.value}")
        return booking

    @staticmethod
    def _mark_cancelled(booking: Booking, cancelled_by: str, reason: str | None = None) -> None:
        booking.status = BookingStatus.CANCELLED.value
        booking.cancelled_by = cancelled_by
        booking.cancellation_reason = reason
        booking.cancelled_at = datetime.now(UTC)
