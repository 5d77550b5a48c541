"""Studio repository - database operations for studios."""

from uuid import UUID

from sqlalchemy import exists, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.session import Session, SessionStatus
from app.models.studio import Studio, StudioStatus, StudioUser


class StudioRepository:
    """Reads and writes for studios."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_active(self) -> list[tuple[Studio, int, int]]:
        """Active studios by name with active-session and user counts."""
        session_count = (
            select(func.count(Session.id))
            .where(
                Session.studio_id == Studio.id,
                Session.status == SessionStatus.ACTIVE.value,
            )
            .correlate(Studio)
            .scalar_subquery()
        )
        user_count = (
            select(func.count(StudioUser.id))
            .where(StudioUser.studio_id == Studio.id)
            .correlate(Studio)
            .scalar_subquery()
        )
        result = await self.db.execute(
            select(Studio, session_count, user_count)
            .where(Studio.status == StudioStatus.ACTIVE.value)
            .order_by(Studio.name)
        )
        return [(studio, sessions, users) for studio, sessions, users in result.all()]

    async def get(self, studio_id: UUID) -> Studio | None:
        result = await self.db.execute(select(Studio).where(Studio.id == studio_id))
        return result.scalar_one_or_none()

    async def count_users(self, studio_id: UUID) -> int:
        result = await self.db.execute(
            select(func.count(StudioUser.id)).where(StudioUser.studio_id == studio_id)
        )
        return result.scalar_one()

    async def slug_exists(self, slug: str) -> bool:
        result = await self.db.execute(
            select(exists().where(func.lower(Studio.slug) == slug.lower()))
        )
        return bool(result.scalar())

    async def add(self, studio: Studio) -> Studio:
        self.db.add(studio)
        await self.db.flush()
        return studio

    async def commit(self) -> None:
        await self.db.commit()

    async def rollback(self) -> None:
        await self.db.rollback()
