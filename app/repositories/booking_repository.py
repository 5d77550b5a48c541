"""Booking repository - database operations for bookings."""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.domain.booking_state import AttendanceStatus, BookingStatus
from app.models.booking import Booking
from app.models.session import Session, SessionStatus


class BookingRepository:
    """Request-scoped reads and writes for the booking flow."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def get_active_session_for_update(self, session_id: UUID) -> Session | None:
        """Load an active session with its studio, locking the row.

        The lock serializes concurrent admissions for the same session on
        PostgreSQL; SQLite ignores FOR UPDATE.
        """
        result = await self.db.execute(
            select(Session)
            .options(selectinload(Session.studio))
            .where(Session.id == session_id, Session.status == SessionStatus.ACTIVE.value)
            .with_for_update(of=Session)
        )
        return result.scalar_one_or_none()

    async def count_bookings(
        self, session_id: UUID, statuses: Iterable[BookingStatus]
    ) -> int:
        result = await self.db.execute(
            select(func.count(Booking.id)).where(
                Booking.session_id == session_id,
                Booking.status.in_([s.value for s in statuses]),
            )
        )
        return result.scalar_one()

    async def has_active_booking(self, session_id: UUID, email: str) -> bool:
        result = await self.db.execute(
            select(
                exists().where(
                    Booking.session_id == session_id,
                    Booking.email == email,
                    Booking.status.in_(
                        [BookingStatus.PENDING.value, BookingStatus.CONFIRMED.value]
                    ),
                )
            )
        )
        return bool(result.scalar())

    async def is_returning_customer(self, studio_id: UUID, email: str) -> bool:
        """A customer who actually attended a confirmed class at the studio."""
        result = await self.db.execute(
            select(
                exists().where(
                    Booking.studio_id == studio_id,
                    Booking.email == email,
                    Booking.status == BookingStatus.CONFIRMED.value,
                    Booking.attendance_status == AttendanceStatus.PRESENT.value,
                )
            )
        )
        return bool(result.scalar())

    async def get(self, booking_id: UUID, for_update: bool = False) -> Booking | None:
        """Get a booking with its session and studio loaded."""
        query = (
            select(Booking)
            .options(selectinload(Booking.session), selectinload(Booking.studio))
            .where(Booking.id == booking_id)
        )
        if for_update:
            query = query.with_for_update(of=Booking)
        result = await self.db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_cancel_token(self, token: UUID) -> Booking | None:
        result = await self.db.execute(
            select(Booking)
            .options(selectinload(Booking.session), selectinload(Booking.studio))
            .where(Booking.cancel_token == token)
            .with_for_update(of=Booking)
        )
        return result.scalar_one_or_none()

    async def list_bookings(
        self,
        session_id: UUID | None = None,
        email: str | None = None,
        status: BookingStatus | None = None,
    ) -> list[Booking]:
        """Filtered bookings, newest first."""
        query = select(Booking).options(
            selectinload(Booking.session), selectinload(Booking.studio)
        )
        if session_id:
            query = query.where(Booking.session_id == session_id)
        if email:
            query = query.where(Booking.email == email)
        if status:
            query = query.where(Booking.status == status.value)

        result = await self.db.execute(query.order_by(Booking.created_at.desc()))
        return list(result.scalars().all())

    async def add(self, booking: Booking) -> Booking:
        self.db.add(booking)
        await self.db.flush()
        return booking

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
