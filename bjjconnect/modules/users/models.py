# bjjconnect/modules/users/models.py
from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Numeric,
    String,
    UniqueConstraint,
    func,
    true,
)
from sqlalchemy.orm import Mapped, mapped_column

from bjjconnect.db.base import Base, ReprMixin, TimestampMixin, UUIDPKMixin


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    action: Mapped[str] = mapped_column(String(64), nullable=False)
    details: Mapped[str | None] = mapped_column()
    timestamp: Mapped[dt.datetime] = mapped_column(server_default=func.now())

    __table_args__ = (Index("ix_audit_logs_timestamp", "timestamp"),)


class Role(str, PyEnum):
    INSTRUCTOR = "instructor"
    STUDENT = "student"


class User(UUIDPKMixin, TimestampMixin, ReprMixin, Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    first_name: Mapped[str] = mapped_column(String(50), nullable=False)
    last_name: Mapped[str] = mapped_column(String(50), nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)

    role: Mapped[str] = mapped_column(String(20), nullable=False)

    # Hourly rate, instructors only
    session_rate: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(10, 2), nullable=True
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=true()
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        CheckConstraint("email = lower(email)", name="email_lowercase"),
        CheckConstraint("role IN ('instructor', 'student')", name="role_valid"),
        CheckConstraint(
            "session_rate IS NULL OR session_rate >= 0", name="session_rate_positive"
        ),
        Index("ix_users_role", "role"),
    )

    @property
    def role_enum(self) -> Role:
        """Get role as Role enum instance."""
        return Role(self.role)
