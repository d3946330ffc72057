# bjjconnect/modules/sessions/service.py
from __future__ import annotations

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.core.config import settings
from bjjconnect.core.exceptions import (
    Forbidden,
    InstructorUnavailable,
    InvalidState,
    NotFound,
    SlotTaken,
    ValidationError,
)
from bjjconnect.core.permission import ensure_party, ensure_role
from bjjconnect.db.base import utcnow
from bjjconnect.modules.availability import repository as availability_repo
from bjjconnect.modules.availability.domain import (
    TimeWindow,
    format_time_of_day,
    is_available,
    parse_time_of_day,
    to_time,
)
from bjjconnect.modules.log import write_audit_log
from bjjconnect.modules.sessions import repository as sessions_repo
from bjjconnect.modules.sessions.conflicts import (
    ConflictPredicate,
    Slot,
    get_conflict_predicate,
)
from bjjconnect.modules.sessions.models import SessionStatus, TrainingSession
from bjjconnect.modules.sessions.pricing import compute_price
from bjjconnect.modules.sessions.schemas import (
    BookSessionRequest,
    Coordinates,
    PartySummary,
    ReviewRequest,
    SessionLocation,
    SessionPublic,
    SessionReview,
    StatusUpdateRequest,
)
from bjjconnect.modules.sessions.transitions import TERMINAL_STATUSES, ensure_transition
from bjjconnect.modules.users import repository as users_repo
from bjjconnect.modules.users.models import Role, User

logger = logging.getLogger(__name__)


def _party(user: User) -> PartySummary:
    return PartySummary(id=user.id, first_name=user.first_name, last_name=user.last_name)


def to_public(record: TrainingSession) -> SessionPublic:
    """
    Convert ORM model to public DTO.
    """
    coordinates = None
    if record.location_lat is not None and record.location_lng is not None:
        coordinates = Coordinates(lat=record.location_lat, lng=record.location_lng)

    review = None
    if record.review_rating is not None:
        review = SessionReview(
            rating=record.review_rating,
            comment=record.review_comment,
            created_at=record.review_created_at,
        )

    return SessionPublic(
        id=record.id,
        instructor_id=record.instructor_id,
        student_id=record.student_id,
        instructor=_party(record.instructor),
        student=_party(record.student),
        date=record.session_date,
        start_time=format_time_of_day(parse_time_of_day(record.start_time)),
        end_time=format_time_of_day(parse_time_of_day(record.end_time)),
        duration=record.duration_minutes,
        location=SessionLocation(
            type=record.location_type,
            address=record.location_address,
            coordinates=coordinates,
        ),
        status=record.status,
        price=float(record.price),
        payment_status=record.payment_status,
        notes=record.notes,
        cancellation_reason=record.cancellation_reason,
        review=review,
        created_at=record.created_at,
        updated_at=record.updated_at,
    )


def requested_window(payload: BookSessionRequest) -> TimeWindow:
    window = TimeWindow.parse(payload.start_time, payload.end_time)
    if not window.is_valid():
        raise ValidationError("endTime must be after startTime", "invalid_window")
    if payload.duration != window.minutes:
        raise ValidationError(
            f"duration ({payload.duration} min) does not match "
            f"{window} ({window.minutes} min)",
            "duration_mismatch",
        )
    return window


# BOOK
async def book_session(
    session: AsyncSession,
    payload: BookSessionRequest,
    current_user: User,
    *,
    conflict_predicate: Optional[ConflictPredicate] = None,
) -> TrainingSession:
    """
    Validate a booking request and materialise it as a ``pending`` session.

    Steps:
      1) instructor must exist with role instructor (row locked until commit)
      2) one availability window of that weekday must contain the request
      3) no active session may collide under the conflict policy
      4) price = rate x duration / 60, frozen on the row
      5) insert; the partial unique index backs up step 3 under races
    """
    ensure_role(current_user, Role.STUDENT, "Only students can book sessions")
    window = requested_window(payload)
    predicate = conflict_predicate or get_conflict_predicate(settings.BOOKING_CONFLICT_POLICY)

    # 1) Instructor
    instructor = await users_repo.get_instructor_by_id(
        session, payload.instructor_id, for_update=True
    )
    if not instructor:
        raise NotFound("Instructor not found", "instructor_not_found")

    # 2) Availability
    availability = await availability_repo.load_for_instructor(
        session, instructor_id=instructor.id
    )
    if not is_available(availability, payload.date, window.start, window.end):
        logger.info(
            "booking_rejected",
            extra={"reason": "unavailable", "instructor_id": str(instructor.id)},
        )
        raise InstructorUnavailable("Instructor is not available at this time")
    if instructor.session_rate is None:
        raise InstructorUnavailable(
            "Instructor has not set a session rate", "instructor_rate_missing"
        )

    # 3) Conflicts
    slot = Slot(
        instructor_id=instructor.id,
        session_date=payload.date,
        start_time=to_time(window.start),
        end_time=to_time(window.end),
    )
    if await sessions_repo.find_conflict(session, slot, predicate):
        logger.info(
            "booking_rejected",
            extra={"reason": "slot_taken", "instructor_id": str(instructor.id)},
        )
        raise SlotTaken("This time slot is already booked")

    # 4) + 5)
    record = TrainingSession(
        instructor_id=instructor.id,
        student_id=current_user.id,
        session_date=slot.session_date,
        start_time=slot.start_time,
        end_time=slot.end_time,
        duration_minutes=payload.duration,
        location_type=payload.location_type.value,
        location_address=payload.address,
        location_lat=payload.coordinates.lat if payload.coordinates else None,
        location_lng=payload.coordinates.lng if payload.coordinates else None,
        status=SessionStatus.PENDING.value,
        price=compute_price(instructor.session_rate, payload.duration),
        notes=payload.notes,
    )
    try:
        record = await sessions_repo.insert(session, record)
    except sessions_repo.DuplicateActiveSlotError:
        raise SlotTaken("This time slot is already booked")

    await write_audit_log(
        session,
        current_user.id,
        "BOOK_SESSION",
        f"session={record.id} instructor={instructor.id} "
        f"{slot.session_date} {window} price={record.price}",
    )
    logger.info(
        "session_booked",
        extra={
            "session_id": str(record.id),
            "instructor_id": str(instructor.id),
            "student_id": str(current_user.id),
        },
    )
    return record


# MY SESSIONS
async def list_my_sessions(
    session: AsyncSession, current_user: User
) -> List[TrainingSession]:
    """
    Instructors get the sessions they teach, students the ones they booked;
    ordered by date then start time.
    """
    if current_user.role_enum is Role.INSTRUCTOR:
        cond = TrainingSession.instructor_id == current_user.id
    else:
        cond = TrainingSession.student_id == current_user.id
    return list(await sessions_repo.list_where(session, cond))


async def _get_or_404(session: AsyncSession, session_id: UUID) -> TrainingSession:
    record = await sessions_repo.get_by_id(session, session_id)
    if not record:
        raise NotFound("Session not found", "session_not_found")
    return record


async def _ensure_slot_free(session: AsyncSession, record: TrainingSession) -> None:
    await users_repo.get_instructor_by_id(session, record.instructor_id, for_update=True)
    slot = Slot(
        instructor_id=record.instructor_id,
        session_date=record.session_date,
        start_time=record.start_time,
        end_time=record.end_time,
    )
    predicate = get_conflict_predicate(settings.BOOKING_CONFLICT_POLICY)
    if await sessions_repo.find_conflict(session, slot, predicate, exclude_id=record.id):
        logger.info(
            "reopen_rejected",
            extra={"reason": "slot_taken", "session_id": str(record.id)},
        )
        raise SlotTaken("This time slot is already booked")


# STATUS
async def update_status(
    session: AsyncSession,
    session_id: UUID,
    payload: StatusUpdateRequest,
    current_user: User,
    *,
    strict: Optional[bool] = None,
) -> TrainingSession:
    """
    Either party moves the session through its lifecycle.

    With strict transitions (default) terminal sessions cannot be reopened;
    the reason is only stored for cancellations. A session reopened in
    permissive mode must win its slot back like a new booking.
    """
    record = await _get_or_404(session, session_id)
    ensure_party(current_user, record, "Not authorized to update this session")

    strict = settings.STRICT_STATUS_TRANSITIONS if strict is None else strict
    previous = record.status_enum
    ensure_transition(previous, payload.status, strict=strict)

    if previous in TERMINAL_STATUSES and payload.status not in TERMINAL_STATUSES:
        # Checked before the status changes so autoflush cannot trip the index
        await _ensure_slot_free(session, record)

    record.status = payload.status.value
    if payload.status is SessionStatus.CANCELLED and payload.cancellation_reason:
        record.cancellation_reason = payload.cancellation_reason
    try:
        record = await sessions_repo.save(session, record)
    except sessions_repo.DuplicateActiveSlotError:
        raise SlotTaken("This time slot is already booked")

    await write_audit_log(
        session,
        current_user.id,
        "UPDATE_SESSION_STATUS",
        f"session={record.id} {previous.value}->{record.status}",
    )
    logger.info(
        "session_status_updated",
        extra={
            "session_id": str(record.id),
            "from_status": previous.value,
            "to_status": record.status,
        },
    )
    return record


# REVIEW
async def add_review(
    session: AsyncSession,
    session_id: UUID,
    payload: ReviewRequest,
    current_user: User,
) -> TrainingSession:
    """
    Only the student of a completed session may review it. A second review
    replaces the first.
    """
    record = await _get_or_404(session, session_id)

    if record.status_enum is not SessionStatus.COMPLETED:
        raise InvalidState("Can only review completed sessions", "session_not_completed")
    if record.student_id != current_user.id:
        raise Forbidden("Only the student can review this session", "not_session_student")

    record.review_rating = payload.rating
    record.review_comment = payload.comment
    record.review_created_at = utcnow()
    record = await sessions_repo.save(session, record)

    await write_audit_log(
        session,
        current_user.id,
        "REVIEW_SESSION",
        f"session={record.id} rating={payload.rating}",
    )
    logger.info(
        "session_reviewed",
        extra={"session_id": str(record.id), "rating": payload.rating},
    )
    return record
