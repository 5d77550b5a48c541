"""Studio endpoints."""

import logging
import uuid
from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError

from app.api.deps import get_session_repository, get_studio_repository
from app.core.exceptions import ConflictError, NotFoundError
from app.models.studio import Studio, StudioStatus
from app.repositories.session_repository import SessionRepository
from app.repositories.studio_repository import StudioRepository
from app.schemas.studio import (
    StudioCreate,
    StudioDetailResponse,
    StudioListItem,
    StudioResponse,
    StudioSessionSummary,
    StudioUpdate,
)
from app.utils.validators import normalize_slug

logger = logging.getLogger(__name__)

router = APIRouter()

Repo = Annotated[StudioRepository, Depends(get_studio_repository)]


@router.get("", response_model=list[StudioListItem])
async def list_studios(repo: Repo) -> list[StudioListItem]:
    """Active studios ordered by name."""
    rows = await repo.list_active()
    return [
        StudioListItem(
            **StudioResponse.model_validate(studio).model_dump(),
            session_count=session_count,
            user_count=user_count,
        )
        for studio, session_count, user_count in rows
    ]


@router.get("/{studio_id}", response_model=StudioDetailResponse)
async def get_studio(
    studio_id: UUID,
    repo: Repo,
    sessions: Annotated[SessionRepository, Depends(get_session_repository)],
) -> StudioDetailResponse:
    """Active studio with its upcoming schedule."""
    studio = await repo.get(studio_id)
    if studio is None or studio.status != StudioStatus.ACTIVE.value:
        logger.warning(f"Studio {studio_id} not found")
        raise NotFoundError("Studio not found")

    rows = await sessions.list_active(studio.id)
    return StudioDetailResponse(
        **StudioResponse.model_validate(studio).model_dump(),
        sessions=[StudioSessionSummary.from_session(s, count) for s, count in rows],
        user_count=await repo.count_users(studio.id),
    )


@router.post("", response_model=StudioResponse, status_code=status.HTTP_201_CREATED)
async def create_studio(studio_in: StudioCreate, repo: Repo) -> StudioResponse:
    """Register a studio."""
    slug = normalize_slug(studio_in.slug)
    if await repo.slug_exists(slug):
        logger.warning(f"Studio slug '{slug}' already taken")
        raise ConflictError("A studio with this slug already exists")

    studio = Studio(
        id=uuid.uuid4(),
        name=studio_in.name.strip(),
        slug=slug,
        timezone=studio_in.timezone.strip(),
        requires_approval=studio_in.requires_approval,
        auto_approve_returning=studio_in.auto_approve_returning,
        status=StudioStatus.ACTIVE.value,
        created_at=datetime.now(UTC),
    )
    try:
        await repo.add(studio)
        await repo.commit()
    except IntegrityError:
        await repo.rollback()
        logger.warning(f"Studio slug '{slug}' already taken (constraint)")
        raise ConflictError("A studio with this slug already exists")

    logger.info(f"Studio {studio.id} created with slug '{slug}'")
    return StudioResponse.model_validate(studio)


@router.put("/{studio_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_studio(studio_id: UUID, studio_in: StudioUpdate, repo: Repo) -> Response:
    """Update studio settings, including the approval flags."""
    studio = await repo.get(studio_id)
    if studio is None or studio.status == StudioStatus.SUSPENDED.value:
        raise NotFoundError("Studio not found")

    studio.name = studio_in.name.strip()
    studio.timezone = studio_in.timezone.strip()
    studio.requires_approval = studio_in.requires_approval
    studio.auto_approve_returning = studio_in.auto_approve_returning
    await repo.commit()

    logger.info(f"Studio {studio_id} updated")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{studio_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_studio(studio_id: UUID, repo: Repo) -> Response:
    """Soft delete: the studio is suspended, never removed."""
    studio = await repo.get(studio_id)
    if studio is None:
        raise NotFoundError("Studio not found")

    studio.status = StudioStatus.SUSPENDED.value
    await repo.commit()

    logger.info(f"Studio {studio_id} suspended")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
