# bjjconnect/core/security.py
"""
Password hashing and the bearer tokens that carry a user's id and role.

Tokens are only issued by the auth routes; route guards trust the ``role``
claim for a first check and services re-check it on the loaded user.
"""
from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from bjjconnect.core.config import settings
from bjjconnect.modules.users.models import Role

ALGORITHM = "HS256"
ACCESS_TOKEN_TYPE = "access"

# bcrypt_sha256 lifts bcrypt's 72 byte limit; plain bcrypt hashes still verify
_pwd_ctx = CryptContext(
    schemes=["bcrypt_sha256", "bcrypt"],
    default="bcrypt_sha256",
    deprecated="auto",
)


class InvalidTokenError(Exception):
    """The bearer token cannot identify a user. ``str(exc)`` is the error code."""


def hash_password(plain_password: str) -> str:
    if not isinstance(plain_password, str) or plain_password == "":
        raise ValueError("Password must be a non-empty string")
    return _pwd_ctx.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    if not password_hash or not plain_password:
        return False
    try:
        return _pwd_ctx.verify(plain_password, password_hash)
    except ValueError:
        # Not a hash this context knows
        return False


def create_access_token(
    *,
    subject: str,
    role: str,
    expires_minutes: Optional[int] = None,
) -> str:
    """
    Sign a token for user ``subject`` acting as ``role`` (instructor or student).
    """
    now = datetime.now(timezone.utc)
    lifetime = timedelta(minutes=expires_minutes or settings.ACCESS_EXPIRES_MIN)
    claims: Dict[str, Any] = {
        "sub": subject,
        "role": Role(role).value,
        "type": ACCESS_TOKEN_TYPE,
        "iat": int(now.timestamp()),
        "exp": int((now + lifetime).timestamp()),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry, then require an access token with a known role.
    """
    if not token:
        raise InvalidTokenError("missing_token")
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError as exc:
        raise InvalidTokenError("invalid_token") from exc

    if claims.get("type") != ACCESS_TOKEN_TYPE:
        raise InvalidTokenError("invalid_token_type")
    if "sub" not in claims or claims.get("role") not in {r.value for r in Role}:
        raise InvalidTokenError("invalid_claims")
    return claims
