# bjjconnect/dependencies.py
from __future__ import annotations

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.core.config import settings
from bjjconnect.core.security import InvalidTokenError, decode_token
from bjjconnect.db.sql import get_session
from bjjconnect.modules.users.models import User
from bjjconnect.modules.users.repository import get_by_id

# /auth/token so the docs UI sends username/password to the form endpoint
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_PREFIX}/auth/token")


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: AsyncSession = Depends(get_session),
) -> User:
    try:
        payload = decode_token(token)
    except InvalidTokenError as exc:
        raise _unauthorized(str(exc))

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise _unauthorized("invalid_claims")

    user = await get_by_id(session, user_id)
    if not user:
        raise _unauthorized("user_not_found")
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="user_inactive",
        )
    return user
