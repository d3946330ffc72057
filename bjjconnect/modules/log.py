from __future__ import annotations

import uuid

from sqlalchemy import insert
from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.modules.users.models import AuditLog


async def write_audit_log(
    session: AsyncSession,
    user_id: uuid.UUID | None,
    action: str,
    details: str | None = None,
):
    """
    Write an audit log entry in the caller's transaction.

    action:
        "REGISTER"
        "BOOK_SESSION"
        "UPDATE_SESSION_STATUS"
        "REVIEW_SESSION"
        "UPDATE_AVAILABILITY"
        "UPDATE_SESSION_RATE"
        "STAGE_PENDING_BOOKING"
    """
    stmt = insert(AuditLog).values(
        id=uuid.uuid4(),
        user_id=user_id,
        action=action,
        details=details,
    )
    await session.execute(stmt)
