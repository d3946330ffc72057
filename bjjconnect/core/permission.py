# bjjconnect/core/permission.py
"""
Role guards.

Route dependencies (``require_instructor`` / ``require_student``) reject the
request before the handler runs. Services re-check with the ``ensure_*``
helpers, which raise ``Forbidden`` so the rule holds for any caller.
"""
from __future__ import annotations

from typing import Protocol
from uuid import UUID

from fastapi import Depends, HTTPException, status

from bjjconnect.core.exceptions import Forbidden
from bjjconnect.dependencies import get_current_user
from bjjconnect.modules.users.models import Role, User


class HasParties(Protocol):
    instructor_id: UUID
    student_id: UUID


def require_roles(*allowed: Role):
    async def dep(user: User = Depends(get_current_user)) -> User:
        if user.role_enum not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="forbidden_role",
            )
        return user

    return dep


require_instructor = require_roles(Role.INSTRUCTOR)
require_student = require_roles(Role.STUDENT)


def ensure_role(user: User, role: Role, message: str) -> None:
    if user.role_enum is not role:
        raise Forbidden(message, "forbidden_role")


def is_party(user: User, record: HasParties) -> bool:
    return user.id in (record.instructor_id, record.student_id)


def ensure_party(user: User, record: HasParties, message: str) -> None:
    if not is_party(user, record):
        raise Forbidden(message, "not_a_party")
