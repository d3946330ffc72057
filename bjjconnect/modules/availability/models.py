# bjjconnect/modules/availability/models.py
from __future__ import annotations

import uuid
from datetime import time

from sqlalchemy import BigInteger, CheckConstraint, ForeignKey, Index, Integer, String, Time
from sqlalchemy.orm import Mapped, mapped_column

from bjjconnect.db.base import Base


class AvailabilityWindow(Base):
    """
    One recurring weekly window of an instructor. One row = one window.
    The rows of an instructor form its availability snapshot.
    """

    __tablename__ = "availability_windows"

    # SQLite only autoincrements INTEGER primary keys
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )

    instructor_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    day_of_week: Mapped[str] = mapped_column(String(9), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="time_order"),
        Index("ix_availability_instructor_day", "instructor_id", "day_of_week"),
    )
