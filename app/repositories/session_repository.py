"""Session repository - database operations for sessions."""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.domain.booking_state import BookingStatus
from app.models.booking import Booking
from app.models.session import Session, SessionStatus
from app.models.studio import Studio, StudioStatus


def confirmed_count_column():
    """Correlated count of confirmed bookings for the outer Session row."""
    return (
        select(func.count(Booking.id))
        .where(
            Booking.session_id == Session.id,
            Booking.status == BookingStatus.CONFIRMED.value,
        )
        .correlate(Session)
        .scalar_subquery()
    )


class SessionRepository:
    """Reads and writes for sessions, with live booked counts."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_active(self, studio_id: UUID | None = None) -> list[tuple[Session, int]]:
        """Active sessions ordered by start time, each with its confirmed count."""
        query = (
            select(Session, confirmed_count_column())
            .options(selectinload(Session.studio))
            .where(Session.status == SessionStatus.ACTIVE.value)
        )
        if studio_id:
            query = query.where(Session.studio_id == studio_id)

        result = await self.db.execute(query.order_by(Session.starts_at))
        return [(session, count) for session, count in result.all()]

    async def get_active_with_count(self, session_id: UUID) -> tuple[Session, int] | None:
        result = await self.db.execute(
            select(Session, confirmed_count_column())
            .options(selectinload(Session.studio))
            .where(Session.id == session_id, Session.status == SessionStatus.ACTIVE.value)
        )
        row = result.one_or_none()
        return (row[0], row[1]) if row else None

    async def get(self, session_id: UUID) -> Session | None:
        result = await self.db.execute(select(Session).where(Session.id == session_id))
        return result.scalar_one_or_none()

    async def confirmed_participants(self, session_id: UUID) -> list[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(
                Booking.session_id == session_id,
                Booking.status == BookingStatus.CONFIRMED.value,
            )
            .order_by(Booking.created_at)
        )
        return list(result.scalars().all())

    async def count_confirmed(self, session_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(Booking.id)).where(
                Booking.session_id == session_id,
                Booking.status == BookingStatus.CONFIRMED.value,
            )
        )
        return result.scalar_one()

    async def get_active_studio(self, studio_id: UUID) -> Studio | None:
        result = await self.db.execute(
            select(Studio).where(
                Studio.id == studio_id, Studio.status == StudioStatus.ACTIVE.value
            )
        )
        return result.scalar_one_or_none()

    async def add(self, session: Session) -> Session:
        self.db.add(session)
        await self.db.flush()
        return session

    async def commit(self) -> None:
        await self.db.commit()
