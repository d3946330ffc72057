# bjjconnect/modules/sessions/models.py
from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    SmallInteger,
    String,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bjjconnect.db.base import Base, ReprMixin, TimestampMixin, UUIDPKMixin
from bjjconnect.modules.users.models import User


class SessionStatus(str, PyEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that still hold their slot
ACTIVE_STATUSES: tuple[str, ...] = (
    SessionStatus.PENDING.value,
    SessionStatus.CONFIRMED.value,
)
_ACTIVE_SLOT_FILTER = text("status IN ('pending', 'confirmed')")


class LocationType(str, PyEnum):
    INSTRUCTOR_LOCATION = "instructor_location"
    STUDENT_LOCATION = "student_location"
    OTHER = "other"


class PaymentStatus(str, PyEnum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class TrainingSession(UUIDPKMixin, TimestampMixin, ReprMixin, Base):
    """
    One booked (or attempted) private session between an instructor and a
    student.
    """

    __tablename__ = "sessions"

    instructor_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"),
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

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SessionStatus.PENDING.value,
        server_default=SessionStatus.PENDING.value,
    )
    # Frozen at booking time
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    payment_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=PaymentStatus.PENDING.value,
        server_default=PaymentStatus.PENDING.value,
    )

    notes: Mapped[Optional[str]] = mapped_column(Text)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text)

    review_rating: Mapped[Optional[int]] = mapped_column(SmallInteger)
    review_comment: Mapped[Optional[str]] = mapped_column(Text)
    review_created_at: Mapped[Optional[dt.datetime]] = mapped_column()

    # Loaded by the repository; async sessions cannot lazy load
    instructor: Mapped[User] = relationship(foreign_keys=[instructor_id])
    student: Mapped[User] = relationship(foreign_keys=[student_id])

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="time_order"),
        CheckConstraint("duration_minutes > 0", name="duration_positive"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled')",
            name="status_valid",
        ),
        CheckConstraint(
            "location_type IN ('instructor_location', 'student_location', 'other')",
            name="location_type_valid",
        ),
        CheckConstraint(
            "payment_status IN ('pending', 'paid', 'refunded')",
            name="payment_status_valid",
        ),
        CheckConstraint(
            "review_rating IS NULL OR (review_rating BETWEEN 1 AND 5)",
            name="review_rating_range",
        ),
        # Avoid double booking: one active session per instructor slot
        Index(
            "uq_sessions_active_slot",
            "instructor_id",
            "session_date",
            "start_time",
            "end_time",
            unique=True,
            postgresql_where=_ACTIVE_SLOT_FILTER,
            sqlite_where=_ACTIVE_SLOT_FILTER,
        ),
        Index("ix_sessions_instructor_date", "instructor_id", "session_date"),
        Index("ix_sessions_student_date", "student_id", "session_date"),
        Index("ix_sessions_status", "status"),
    )

    @property
    def status_enum(self) -> SessionStatus:
        return SessionStatus(self.status)
