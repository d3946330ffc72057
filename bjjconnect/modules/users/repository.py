# bjjconnect/modules/users/repository.py
from __future__ import annotations

from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.modules.users.models import Role, User


class EmailAlreadyExistsError(Exception):
    """Raised when trying to insert a user with an email that already exists."""


class InvalidUserDataError(Exception):
    """Raised when DB-level constraints fail (e.g., bad CHECK constraints)."""


async def get_by_id(session: AsyncSession, user_id: UUID) -> Optional[User]:
    """
    Returns a User by primary key or None if not found.
    """
    return await session.get(User, user_id)


async def get_by_email(session: AsyncSession, email: str) -> Optional[User]:
    email = email.strip().lower()
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_instructor_by_id(
    session: AsyncSession, instructor_id: UUID, *, for_update: bool = False
) -> Optional[User]:
    """
    Return the user only if it is an instructor.

    ``for_update`` takes a row lock (PostgreSQL) so concurrent bookings of the
    same instructor run their check-then-insert one after another.
    """
    stmt = select(User).where(
        User.id == instructor_id, User.role == Role.INSTRUCTOR.value
    )
    if for_update:
        stmt = stmt.with_for_update()
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def create_user(
    session: AsyncSession,
    *,
    email: str,
    password_hash: str,
    first_name: str,
    last_name: str,
    role: Role,
    phone: Optional[str] = None,
    session_rate: Optional[Decimal] = None,
) -> User:
    """
    Inserts a new user row and returns the persisted ORM instance.

    Expects a *hashed* password. Uniqueness and CHECK violations are mapped
    to repository exceptions.
    """
    user = User(
        email=email.strip().lower(),
        password_hash=password_hash,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        phone=phone,
        role=role.value,
        session_rate=session_rate if role is Role.INSTRUCTOR else None,
    )
    session.add(user)
    try:
        await session.flush()
    except IntegrityError as exc:
        message = str(exc.orig).lower() if exc.orig else str(exc).lower()
        if "uq_users_email" in message or "unique" in message:
            raise EmailAlreadyExistsError("Email already registered") from exc
        raise InvalidUserDataError("Failed to insert user") from exc

    await session.refresh(user)
    return user


async def update_session_rate(
    session: AsyncSession, user: User, rate: Decimal
) -> User:
    user.session_rate = rate
    await session.flush()
    await session.refresh(user)
    return user
