# bjjconnect/modules/users/schemas.py
from __future__ import annotations

import re
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, SecretStr, StringConstraints, field_validator

from bjjconnect.core.schemas import CamelModel, SuccessEnvelope
from bjjconnect.modules.availability.schemas import AvailabilityDay
from bjjconnect.modules.users.models import Role

NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=50)]
PhoneStr = Annotated[str, StringConstraints(pattern=r"^\+?[1-9]\d{1,14}$")]  # E.164 simple
RateDecimal = Annotated[Decimal, Field(ge=0, max_digits=10, decimal_places=2)]

PASSWORD_RE = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)[A-Za-z\d\S]{8,64}$")


class RegisterRequest(CamelModel):
    email: EmailStr
    password: SecretStr = Field(..., description="8-64 chars, at least one letter and one digit")
    first_name: NameStr
    last_name: NameStr
    role: Role
    phone: Optional[PhoneStr] = None
    session_rate: Optional[RateDecimal] = Field(
        default=None, description="Hourly rate, instructors only"
    )

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password_strength(cls, v: SecretStr) -> SecretStr:
        if not PASSWORD_RE.match(v.get_secret_value()):
            raise ValueError(
                "Password must be 8-64 chars and include at least one letter and one digit"
            )
        return v


class LoginRequest(CamelModel):
    email: EmailStr
    password: SecretStr

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserPublic(CamelModel):
    id: UUID
    email: EmailStr
    role: Role
    first_name: str
    last_name: str
    phone: Optional[str] = None
    session_rate: Optional[float] = None
    created_at: datetime


class AuthResponse(SuccessEnvelope):
    token: str
    user: UserPublic


class MeResponse(SuccessEnvelope):
    user: UserPublic


class OAuthTokenResponse(BaseModel):
    # OAuth2 password flow requires these exact snake_case keys
    success: bool = True
    access_token: str
    token_type: str = "bearer"


class InstructorPublic(CamelModel):
    id: UUID
    first_name: str
    last_name: str
    session_rate: Optional[float] = None
    availability: list[AvailabilityDay]


class InstructorResponse(SuccessEnvelope):
    instructor: InstructorPublic


class SessionRateUpdateRequest(CamelModel):
    session_rate: RateDecimal


class SessionRateResponse(SuccessEnvelope):
    session_rate: float
