# bjjconnect/routers/users.py
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.core.permission import require_instructor
from bjjconnect.db.sql import get_session
from bjjconnect.modules.availability import service as availability_service
from bjjconnect.modules.availability.schemas import (
    AvailabilityResponse,
    AvailabilityUpdateRequest,
    to_days,
)
from bjjconnect.modules.users import service as users_service
from bjjconnect.modules.users.models import User
from bjjconnect.modules.users.schemas import (
    InstructorResponse,
    SessionRateResponse,
    SessionRateUpdateRequest,
)

router = APIRouter(prefix="/users", tags=["users"])


@router.put(
    "/availability",
    response_model=AvailabilityResponse,
    summary="Replace the instructor's weekly availability",
)
async def users_replace_availability(
    payload: AvailabilityUpdateRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_instructor),
):
    snapshot = await availability_service.replace_availability(
        session, current_user, payload.availability
    )
    return AvailabilityResponse(availability=to_days(snapshot))


@router.get(
    "/instructor/{instructor_id}",
    response_model=InstructorResponse,
    summary="Public instructor profile with rate and availability",
)
async def users_instructor_profile(
    instructor_id: UUID,
    session: AsyncSession = Depends(get_session),
):
    profile = await users_service.get_instructor_profile(session, instructor_id)
    return InstructorResponse(instructor=profile)


@router.get(
    "/instructor/{instructor_id}/availability",
    response_model=AvailabilityResponse,
    summary="Weekly availability of one instructor",
)
async def users_instructor_availability(
    instructor_id: UUID,
    session: AsyncSession = Depends(get_session),
):
    snapshot = await availability_service.get_availability(session, instructor_id)
    return AvailabilityResponse(availability=to_days(snapshot))


@router.put(
    "/hourly-rate",
    response_model=SessionRateResponse,
    summary="Set the instructor's hourly session rate",
)
async def users_update_rate(
    payload: SessionRateUpdateRequest,
    session: AsyncSession = Depends(get_session),
    current_user: User = Depends(require_instructor),
):
    user = await users_service.update_session_rate(session, current_user, payload.session_rate)
    return SessionRateResponse(session_rate=float(user.session_rate))
