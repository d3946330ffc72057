# bjjconnect/routers/sessions.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.core.permission import require_student
from bjjconnect.core.schemas import ErrorResponse
from bjjconnect.db.sql import get_session
from bjjconnect.dependencies import get_current_user
from bjjconnect.modules.pending import service as pending_service
from bjjconnect.modules.pending.schemas import PendingBookingResponse
from bjjconnect.modules.sessions import service as sessions_service
from bjjconnect.modules.sessions.schemas import (
    BookSessionRequest,
    ReviewRequest,
    SessionListResponse,
    SessionResponse,
    StatusUpdateRequest,
)
from bjjconnect.modules.users.models import User

router = APIRouter(prefix="/sessions", tags=["sessions"])

# Domain errors raised below are rendered by the handlers in core/errors.py


@router.post(
    "/book",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book a session with an instructor (student only)",
    responses={
        400: {"model": ErrorResponse, "description": "Instructor unavailable, slot taken or invalid window"},
        403: {"model": ErrorResponse, "description": "Caller is not a student"},
        404: {"model": ErrorResponse, "description": "Instructor not found"},
    },
)
async def sessions_book(
    payload: BookSessionRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_student),
):
    record = await sessions_service.book_session(session, payload, current_user)
    return SessionResponse(session=sessions_service.to_public(record))


@router.get(
    "/my-sessions",
    response_model=SessionListResponse,
    summary="Sessions the current user teaches or attends",
)
async def sessions_mine(
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    records = await sessions_service.list_my_sessions(session, current_user)
    return SessionListResponse(sessions=[sessions_service.to_public(r) for r in records])


@router.put(
    "/{session_id}/status",
    response_model=SessionResponse,
    summary="Move a session through its lifecycle (either party)",
)
async def sessions_update_status(
    session_id: UUID,
    payload: StatusUpdateRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    record = await sessions_service.update_status(session, session_id, payload, current_user)
    return SessionResponse(session=sessions_service.to_public(record))


@router.post(
    "/{session_id}/review",
    response_model=SessionResponse,
    summary="Rate a completed session (its student only)",
)
async def sessions_review(
    session_id: UUID,
    payload: ReviewRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    record = await sessions_service.add_review(session, session_id, payload, current_user)
    return SessionResponse(session=sessions_service.to_public(record))


# Booking started before sign-in
@router.post(
    "/pending",
    response_model=PendingBookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Hold a booking request until the visitor signs in",
)
async def sessions_stage_pending(
    payload: BookSessionRequest,
    session: AsyncSession = Depends(get_session),
):
    record = await pending_service.stage(session, payload)
    return PendingBookingResponse(pending_booking=pending_service.to_public(record))


@router.get(
    "/pending/{token}",
    response_model=PendingBookingResponse,
    summary="Read a held booking request",
)
async def sessions_get_pending(
    token: UUID,
    session: AsyncSession = Depends(get_session),
):
    record = await pending_service.get(session, token)
    return PendingBookingResponse(pending_booking=pending_service.to_public(record))


@router.post(
    "/pending/{token}/confirm",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book a held request for the signed-in student",
)
async def sessions_confirm_pending(
    token: UUID,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_student),
):
    record = await pending_service.confirm(session, token, current_user)
    return SessionResponse(session=sessions_service.to_public(record))
