# bjjconnect/modules/pending/repository.py
from __future__ import annotations

import datetime as dt
from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.modules.pending.models import PendingBooking


async def get_by_token(db: AsyncSession, token: UUID) -> Optional[PendingBooking]:
    return await db.get(PendingBooking, token)


async def insert(db: AsyncSession, record: PendingBooking) -> PendingBooking:
    db.add(record)
    await db.flush()
    await db.refresh(record)
    return record


async def remove(db: AsyncSession, record: PendingBooking) -> None:
    await db.delete(record)
    await db.flush()


async def purge_expired(db: AsyncSession, now: dt.datetime) -> int:
    result = await db.execute(
        delete(PendingBooking).where(PendingBooking.expires_at <= now)
    )
    return result.rowcount or 0
