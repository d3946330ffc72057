# bjjconnect/modules/pending/schemas.py
from __future__ import annotations

import datetime as dt
from uuid import UUID

from bjjconnect.core.schemas import SuccessEnvelope
from bjjconnect.modules.sessions.schemas import BookSessionRequest


class PendingBookingPublic(BookSessionRequest):
    """The staged request plus its handle and deadline."""

    token: UUID
    expires_at: dt.datetime


class PendingBookingResponse(SuccessEnvelope):
    pending_booking: PendingBookingPublic
