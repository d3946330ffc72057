# bjjconnect/modules/users/service.py
from __future__ import annotations

import logging
from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.core.exceptions import NotFound, ValidationError
from bjjconnect.core.permission import ensure_role
from bjjconnect.core.security import create_access_token, hash_password, verify_password
from bjjconnect.modules.availability import repository as availability_repo
from bjjconnect.modules.availability.schemas import to_days
from bjjconnect.modules.log import write_audit_log
from bjjconnect.modules.users import repository as users_repo
from bjjconnect.modules.users.models import Role, User
from bjjconnect.modules.users.schemas import (
    AuthResponse,
    InstructorPublic,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)

logger = logging.getLogger(__name__)


# Service-level errors (map them to HTTP in the router)
class EmailAlreadyExists(Exception):
    pass


class InvalidCredentials(Exception):
    pass


def to_public(user: User) -> UserPublic:
    """
    Convert ORM model to public DTO.
    """
    return UserPublic.model_validate(
        {
            "id": user.id,
            "email": user.email,
            "role": user.role_enum,
            "first_name": user.first_name,
            "last_name": user.last_name,
            "phone": user.phone,
            "session_rate": float(user.session_rate) if user.session_rate is not None else None,
            "created_at": user.created_at,
        }
    )


def _issue_token(user: User) -> str:
    return create_access_token(subject=str(user.id), role=user.role)


async def register_user(session: AsyncSession, payload: RegisterRequest) -> AuthResponse:
    """
    Business flow for user registration:
      1) Normalize and check email uniqueness.
      2) Hash password with bcrypt.
      3) Persist user (instructors start with no availability).
      4) Return a token and the public DTO.
    """
    email = payload.email.strip().lower()

    # 1) Uniqueness check; the unique constraint still guards races
    if await users_repo.get_by_email(session, email):
        raise EmailAlreadyExists("email_already_exists")

    # 2) Hash password (never store plain text)
    password_hash = hash_password(payload.password.get_secret_value())

    # 3) Persist
    try:
        user = await users_repo.create_user(
            session,
            email=email,
            password_hash=password_hash,
            first_name=payload.first_name,
            last_name=payload.last_name,
            role=payload.role,
            phone=payload.phone,
            session_rate=payload.session_rate,
        )
    except users_repo.EmailAlreadyExistsError:
        raise EmailAlreadyExists("email_already_exists")
    except users_repo.InvalidUserDataError:
        raise ValidationError("Invalid user data", "invalid_user_data")

    await write_audit_log(session, user.id, "REGISTER", f"role={user.role}")
    logger.info("user_registered", extra={"user_id": str(user.id), "role": user.role})

    # 4) Token + public DTO
    return AuthResponse(token=_issue_token(user), user=to_public(user))


async def login_user(session: AsyncSession, payload: LoginRequest) -> AuthResponse:
    """
    1) Fetch user by email
    2) Verify bcrypt password
    3) Issue an access token
    """
    user = await users_repo.get_by_email(session, payload.email)
    if not user or not user.is_active:
        raise InvalidCredentials("invalid_credentials")

    if not verify_password(payload.password.get_secret_value(), user.password_hash):
        logger.info("login_failed", extra={"user_id": str(user.id)})
        raise InvalidCredentials("invalid_credentials")

    return AuthResponse(token=_issue_token(user), user=to_public(user))


async def get_instructor_profile(session: AsyncSession, instructor_id: UUID) -> InstructorPublic:
    instructor = await users_repo.get_instructor_by_id(session, instructor_id)
    if not instructor:
        raise NotFound("Instructor not found", "instructor_not_found")
    availability = await availability_repo.load_for_instructor(
        session, instructor_id=instructor.id
    )
    return InstructorPublic(
        id=instructor.id,
        first_name=instructor.first_name,
        last_name=instructor.last_name,
        session_rate=(
            float(instructor.session_rate) if instructor.session_rate is not None else None
        ),
        availability=to_days(availability),
    )


async def update_session_rate(
    session: AsyncSession, current_user: User, rate: Decimal
) -> User:
    ensure_role(current_user, Role.INSTRUCTOR, "Only instructors have a session rate")
    previous = current_user.session_rate
    user = await users_repo.update_session_rate(session, current_user, rate)
    await write_audit_log(
        session,
        user.id,
        "UPDATE_SESSION_RATE",
        f"{previous}->{user.session_rate}",
    )
    logger.info("session_rate_updated", extra={"instructor_id": str(user.id)})
    return user
