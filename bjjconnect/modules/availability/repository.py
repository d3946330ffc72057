# bjjconnect/modules/availability/repository.py
from __future__ import annotations

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.modules.availability.domain import (
    AvailabilitySet,
    TimeWindow,
    parse_time_of_day,
    to_time,
)
from bjjconnect.modules.availability.models import AvailabilityWindow


async def load_for_instructor(
    db: AsyncSession, *, instructor_id: UUID
) -> AvailabilitySet:
    rows = await db.execute(
        select(AvailabilityWindow)
        .where(AvailabilityWindow.instructor_id == instructor_id)
        .order_by(AvailabilityWindow.day_of_week, AvailabilityWindow.start_time)
    )
    grouped: dict[str, list[TimeWindow]] = {}
    for row in rows.scalars().all():
        grouped.setdefault(row.day_of_week, []).append(
            TimeWindow(parse_time_of_day(row.start_time), parse_time_of_day(row.end_time))
        )
    # Stored rows were validated on write; rows inserted by hand are not re-checked
    return AvailabilitySet.from_days(grouped.items(), strict=False)


async def replace_for_instructor(
    db: AsyncSession, *, instructor_id: UUID, availability: AvailabilitySet
) -> int:
    """
    Delete every window of the instructor and insert the new snapshot in the
    caller's transaction. Returns the number of windows written.
    """
    await db.execute(
        delete(AvailabilityWindow).where(
            AvailabilityWindow.instructor_id == instructor_id
        )
    )
    rows = [
        AvailabilityWindow(
            instructor_id=instructor_id,
            day_of_week=day,
            start_time=to_time(window.start),
            end_time=to_time(window.end),
        )
        for day, windows in availability.to_days()
        for window in windows
    ]
    db.add_all(rows)
    await db.flush()
    return len(rows)
