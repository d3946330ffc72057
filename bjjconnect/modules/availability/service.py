# bjjconnect/modules/availability/service.py
from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.core.exceptions import NotFound
from bjjconnect.core.permission import ensure_role
from bjjconnect.modules.availability import repository as availability_repo
from bjjconnect.modules.availability.domain import AvailabilitySet
from bjjconnect.modules.availability.schemas import AvailabilityDay, to_windows
from bjjconnect.modules.log import write_audit_log
from bjjconnect.modules.users import repository as users_repo
from bjjconnect.modules.users.models import Role, User

logger = logging.getLogger(__name__)


async def get_availability(session: AsyncSession, instructor_id: UUID) -> AvailabilitySet:
    instructor = await users_repo.get_instructor_by_id(session, instructor_id)
    if not instructor:
        raise NotFound("Instructor not found", "instructor_not_found")
    return await availability_repo.load_for_instructor(session, instructor_id=instructor_id)


async def replace_availability(
    session: AsyncSession,
    current_user: User,
    days: List[AvailabilityDay],
) -> AvailabilitySet:
    """
    Validate and store a new availability snapshot for the calling instructor.

    The previous windows are dropped in the same transaction, so readers see
    either the old or the new set, never a mix.
    """
    ensure_role(current_user, Role.INSTRUCTOR, "Only instructors have availability")

    snapshot = AvailabilitySet.from_days(to_windows(days), strict=True)
    written = await availability_repo.replace_for_instructor(
        session, instructor_id=current_user.id, availability=snapshot
    )
    await write_audit_log(
        session,
        current_user.id,
        "UPDATE_AVAILABILITY",
        f"{written} windows on {len(snapshot.days)} days",
    )
    logger.info(
        "availability_replaced",
        extra={"instructor_id": str(current_user.id), "windows": written},
    )
    return snapshot
