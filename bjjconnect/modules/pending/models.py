# bjjconnect/modules/pending/models.py
from __future__ import annotations

import datetime as dt
import uuid
from typing import Optional

from sqlalchemy import Date, DateTime, Float, ForeignKey, Index, Integer, String, Text, Time, func
from sqlalchemy.orm import Mapped, mapped_column

from bjjconnect.db.base import Base, ReprMixin


class PendingBooking(ReprMixin, Base):
    """
    A booking request held server side until a student signs in and
    confirms it. The token is the only handle the client gets.
    """

    __tablename__ = "pending_bookings"

    token: Mapped[uuid.UUID] = mapped_column(default=uuid.uuid4, primary_key=True)

    instructor_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    session_date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    start_time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    end_time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)

    location_type: Mapped[str] = mapped_column(String(32), nullable=False)
    location_address: Mapped[Optional[str]] = mapped_column(String(255))
    location_lat: Mapped[Optional[float]] = mapped_column(Float)
    location_lng: Mapped[Optional[float]] = mapped_column(Float)
    notes: Mapped[Optional[str]] = mapped_column(Text)

    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.now()
    )
    expires_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False)

    __table_args__ = (Index("ix_pending_bookings_expires_at", "expires_at"),)

    def is_expired(self, now: dt.datetime) -> bool:
        return self.expires_at <= now
