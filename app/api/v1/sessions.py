"""Session endpoints."""

import logging
import uuid
from datetime import UTC, datetime
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.deps import get_session_repository
from app.core.exceptions import InvalidInput, NotFoundError
from app.domain.cancellation_policy import as_utc
from app.models.session import Session, SessionStatus
from app.repositories.session_repository import SessionRepository
from app.schemas.session import (
    SessionBase,
    SessionCreate,
    SessionCreatedResponse,
    SessionDetailResponse,
    SessionParticipant,
    SessionResponse,
    SessionUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

Repo = Annotated[SessionRepository, Depends(get_session_repository)]


def _validate_size(data: SessionBase) -> None:
    if data.capacity <= 0:
        raise InvalidInput("Capacity must be greater than 0")
    if data.duration_minutes <= 0:
        raise InvalidInput("Duration must be greater than 0")


@router.get("", response_model=list[SessionResponse])
async def list_sessions(
    repo: Repo,
    studio_id: UUID | None = Query(None),
) -> list[SessionResponse]:
    """Active sessions ordered by start time."""
    rows = await repo.list_active(studio_id)
    return [SessionResponse.from_session(session, count) for session, count in rows]


@router.get("/{session_id}", response_model=SessionDetailResponse)
async def get_session(session_id: UUID, repo: Repo) -> SessionDetailResponse:
    """Session with its confirmed participants."""
    row = await repo.get_active_with_count(session_id)
    if row is None:
        raise NotFoundError("Session not found")

    session, booked_count = row
    participants = await repo.confirmed_participants(session.id)
    return SessionDetailResponse(
        **SessionResponse.from_session(session, booked_count).model_dump(),
        participants=[SessionParticipant.model_validate(p) for p in participants],
    )


@router.post("", response_model=SessionCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_session(session_in: SessionCreate, repo: Repo) -> SessionCreatedResponse:
    """Schedule a new session for a studio."""
    studio = await repo.get_active_studio(session_in.studio_id)
    if studio is None:
        logger.warning(f"Cannot create session: studio {session_in.studio_id} not active")
        raise InvalidInput("Studio not found or inactive")

    _validate_size(session_in)
    if as_utc(session_in.starts_at) <= datetime.now(UTC):
        raise InvalidInput("Start time must be in the future")

    session = Session(
        id=uuid.uuid4(),
        studio_id=studio.id,
        title=session_in.title.strip(),
        starts_at=as_utc(session_in.starts_at),
        duration_minutes=session_in.duration_minutes,
        capacity=session_in.capacity,
        status=SessionStatus.ACTIVE.value,
        created_at=datetime.now(UTC),
    )
    await repo.add(session)
    await repo.commit()

    logger.info(f"Session {session.id} created for studio {studio.id}")
    return SessionCreatedResponse.model_validate(session)


@router.put("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_session(session_id: UUID, session_in: SessionUpdate, repo: Repo) -> Response:
    """Reschedule or resize a session."""
    session = await repo.get(session_id)
    if session is None or session.status != SessionStatus.ACTIVE.value:
        logger.warning(f"Session {session_id} not found or cancelled")
        raise NotFoundError("Session not found or cancelled")

    _validate_size(session_in)

    confirmed = await repo.count_confirmed(session.id)
    if session_in.capacity < confirmed:
        logger.warning(
            f"Cannot shrink session {session_id} to {session_in.capacity}: "
            f"{confirmed} confirmed bookings"
        )
        raise InvalidInput(
            f"Cannot reduce capacity below current bookings ({confirmed})",
            booked=confirmed,
        )

    session.title = session_in.title.strip()
    session.starts_at = as_utc(session_in.starts_at)
    session.duration_minutes = session_in.duration_minutes
    session.capacity = session_in.capacity
    await repo.commit()

    logger.info(f"Session {session_id} updated")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_session(session_id: UUID, repo: Repo) -> Response:
    """Cancel a session; its bookings are kept."""
    session = await repo.get(session_id)
    if session is None:
        raise NotFoundError("Session not found")

    session.status = SessionStatus.CANCELLED.value
    await repo.commit()

    logger.info(f"Session {session_id} cancelled")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
