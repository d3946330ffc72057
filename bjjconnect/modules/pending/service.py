# bjjconnect/modules/pending/service.py
from __future__ import annotations

import datetime as dt
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.core.config import settings
from bjjconnect.core.exceptions import InvalidState, NotFound
from bjjconnect.db.base import utcnow
from bjjconnect.modules.availability.domain import format_time_of_day, parse_time_of_day, to_time
from bjjconnect.modules.log import write_audit_log
from bjjconnect.modules.pending import repository as pending_repo
from bjjconnect.modules.pending.models import PendingBooking
from bjjconnect.modules.pending.schemas import PendingBookingPublic
from bjjconnect.modules.sessions import service as sessions_service
from bjjconnect.modules.sessions.models import TrainingSession
from bjjconnect.modules.sessions.schemas import BookSessionRequest, Coordinates
from bjjconnect.modules.users import repository as users_repo
from bjjconnect.modules.users.models import User

logger = logging.getLogger(__name__)


def _to_request(record: PendingBooking) -> BookSessionRequest:
    coordinates = None
    if record.location_lat is not None and record.location_lng is not None:
        coordinates = Coordinates(lat=record.location_lat, lng=record.location_lng)
    return BookSessionRequest(
        instructor_id=record.instructor_id,
        date=record.session_date,
        start_time=format_time_of_day(parse_time_of_day(record.start_time)),
        end_time=format_time_of_day(parse_time_of_day(record.end_time)),
        duration=record.duration_minutes,
        location_type=record.location_type,
        address=record.location_address,
        coordinates=coordinates,
        notes=record.notes,
    )


def to_public(record: PendingBooking) -> PendingBookingPublic:
    request = _to_request(record)
    return PendingBookingPublic(
        **request.model_dump(),
        token=record.token,
        expires_at=record.expires_at,
    )


async def stage(
    session: AsyncSession,
    payload: BookSessionRequest,
    *,
    now: Optional[dt.datetime] = None,
) -> PendingBooking:
    """
    Hold a booking request for an anonymous visitor.

    Only the shape of the request is checked here (times, duration,
    instructor). Availability and conflicts are evaluated at confirmation.
    """
    now = now or utcnow()
    window = sessions_service.requested_window(payload)

    if not await users_repo.get_instructor_by_id(session, payload.instructor_id):
        raise NotFound("Instructor not found", "instructor_not_found")

    purged = await pending_repo.purge_expired(session, now)
    if purged:
        logger.info("pending_bookings_purged", extra={"count": purged})

    record = PendingBooking(
        instructor_id=payload.instructor_id,
        session_date=payload.date,
        start_time=to_time(window.start),
        end_time=to_time(window.end),
        duration_minutes=payload.duration,
        location_type=payload.location_type.value,
        location_address=payload.address,
        location_lat=payload.coordinates.lat if payload.coordinates else None,
        location_lng=payload.coordinates.lng if payload.coordinates else None,
        notes=payload.notes,
        expires_at=now + dt.timedelta(minutes=settings.PENDING_BOOKING_TTL_MINUTES),
    )
    record = await pending_repo.insert(session, record)

    await write_audit_log(
        session,
        None,
        "STAGE_PENDING_BOOKING",
        f"token={record.token} instructor={record.instructor_id} "
        f"{record.session_date} {window}",
    )
    logger.info(
        "pending_booking_staged",
        extra={"token": str(record.token), "expires_at": record.expires_at.isoformat()},
    )
    return record


async def get(
    session: AsyncSession, token: UUID, *, now: Optional[dt.datetime] = None
) -> PendingBooking:
    record = await pending_repo.get_by_token(session, token)
    if not record:
        raise NotFound("Pending booking not found", "pending_booking_not_found")
    if record.is_expired(now or utcnow()):
        raise InvalidState("Pending booking expired", "pending_booking_expired")
    return record


async def confirm(
    session: AsyncSession,
    token: UUID,
    current_user: User,
    *,
    now: Optional[dt.datetime] = None,
) -> TrainingSession:
    """
    Book the staged request for the signed-in student and consume the token.

    A failed booking leaves the token in place so the student can retry.
    """
    record = await get(session, token, now=now)
    booked = await sessions_service.book_session(session, _to_request(record), current_user)
    await pending_repo.remove(session, record)
    logger.info(
        "pending_booking_confirmed",
        extra={"token": str(token), "session_id": str(booked.id)},
    )
    return booked
