# bjjconnect/modules/sessions/repository.py
from __future__ import annotations

from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bjjconnect.modules.sessions.conflicts import ConflictPredicate, Slot
from bjjconnect.modules.sessions.models import ACTIVE_STATUSES, TrainingSession

_PARTIES = ("instructor", "student")


class DuplicateActiveSlotError(Exception):
    """The partial unique index on active slots rejected the write."""


def _is_active_slot_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig).lower() if exc.orig else str(exc).lower()
    return "uq_sessions_active_slot" in message or "unique" in message


async def _flush_and_reload(db: AsyncSession, record: TrainingSession) -> TrainingSession:
    try:
        # Flush to surface the unique index violation here, not at commit
        await db.flush()
    except IntegrityError as exc:
        if _is_active_slot_violation(exc):
            raise DuplicateActiveSlotError("slot_already_taken") from exc
        raise
    # updated_at is set server side
    await db.refresh(record)
    await db.refresh(record, attribute_names=_PARTIES)
    return record


async def get_by_id(db: AsyncSession, session_id: UUID) -> Optional[TrainingSession]:
    stmt = (
        select(TrainingSession)
        .where(TrainingSession.id == session_id)
        .options(selectinload(TrainingSession.instructor), selectinload(TrainingSession.student))
    )
    return (await db.execute(stmt)).scalar_one_or_none()


async def find_conflict(
    db: AsyncSession,
    slot: Slot,
    predicate: ConflictPredicate,
    *,
    exclude_id: Optional[UUID] = None,
) -> Optional[TrainingSession]:
    """
    First active (pending/confirmed) session colliding with ``slot`` under
    ``predicate``, or None.
    """
    stmt = select(TrainingSession).where(
        predicate(slot), TrainingSession.status.in_(ACTIVE_STATUSES)
    )
    if exclude_id is not None:
        stmt = stmt.where(TrainingSession.id != exclude_id)
    return (await db.execute(stmt.limit(1))).scalar_one_or_none()


async def insert(db: AsyncSession, record: TrainingSession) -> TrainingSession:
    db.add(record)
    return await _flush_and_reload(db, record)


async def save(db: AsyncSession, record: TrainingSession) -> TrainingSession:
    return await _flush_and_reload(db, record)


async def list_where(
    db: AsyncSession, condition: ColumnElement[bool]
) -> Sequence[TrainingSession]:
    stmt = (
        select(TrainingSession)
        .where(condition)
        .options(selectinload(TrainingSession.instructor), selectinload(TrainingSession.student))
        .order_by(
            TrainingSession.session_date,
            TrainingSession.start_time,
            TrainingSession.created_at,
        )
    )
    return (await db.execute(stmt)).scalars().all()
