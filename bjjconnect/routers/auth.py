# bjjconnect/routers/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from bjjconnect.db.sql import get_session
from bjjconnect.dependencies import get_current_user
from bjjconnect.modules.users.models import User
from bjjconnect.modules.users.schemas import (
    AuthResponse,
    LoginRequest,
    MeResponse,
    OAuthTokenResponse,
    RegisterRequest,
)
from bjjconnect.modules.users.service import (
    EmailAlreadyExists,
    InvalidCredentials,
    login_user,
    register_user,
    to_public,
)

router = APIRouter(tags=["auth"])


@router.post(
    "/auth/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new instructor or student account",
    responses={
        201: {"description": "User created"},
        400: {"description": "Invalid payload or email already registered"},
    },
)
async def auth_register(
    payload: RegisterRequest,
    session: AsyncSession = Depends(get_session),
):
    """
    Register a new user and return a Bearer token.

    Notes:
    - Email is normalized to lowercase.
    - Password must pass strength checks (8-64 chars, one letter, one digit).
    - Instructors start with an empty availability.
    """
    try:
        return await register_user(session, payload)
    except EmailAlreadyExists:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="email_already_exists",
        )


@router.post(
    "/auth/login",
    response_model=AuthResponse,
    summary="Obtain a Bearer token with email and password (JSON body)",
    responses={401: {"description": "Invalid credentials"}},
)
async def auth_login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_session),
):
    try:
        return await login_user(session, payload)
    except InvalidCredentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_credentials",
        )


@router.post(
    "/auth/token",
    response_model=OAuthTokenResponse,
    summary="OAuth2 password flow login (for Swagger UI)",
    responses={401: {"description": "Invalid credentials"}},
)
async def auth_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: AsyncSession = Depends(get_session),
):
    """
    Swagger sends form data:
    - username: user email
    - password: user password
    """
    login_payload = LoginRequest(email=form_data.username, password=form_data.password)
    try:
        result = await login_user(session, login_payload)
    except InvalidCredentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid_credentials",
        )
    return OAuthTokenResponse(access_token=result.token)


@router.get(
    "/auth/me",
    response_model=MeResponse,
    summary="Return the current user's profile",
)
async def auth_me(current_user: User = Depends(get_current_user)):
    return MeResponse(user=to_public(current_user))
