# tests/conftest.py
import os

# Settings are read at import time
os.environ.setdefault("SQL_DSN", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_AUTO_CREATE", "false")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("APP_ENV", "test")

from decimal import Decimal
from typing import Optional

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from bjjconnect.core.security import create_access_token, hash_password
from bjjconnect.db.base import Base
from bjjconnect.db.sql import _import_models, build_sessionmaker, get_session
from bjjconnect.main import create_app
from bjjconnect.modules.availability import repository as availability_repo
from bjjconnect.modules.availability.domain import AvailabilitySet, TimeWindow
from bjjconnect.modules.users import repository as users_repo
from bjjconnect.modules.users.models import Role, User

PASSWORD = "Secret123"
# bcrypt is slow on purpose, hash once per run
PASSWORD_HASH = hash_password(PASSWORD)

# 2024-01-01 is a Monday
MONDAY = "2024-01-01"
TUESDAY = "2024-01-02"


@pytest_asyncio.fixture
async def engine():
    _import_models()
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_sessionmaker(engine)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    app = create_app()

    async def _override_get_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_session] = _override_get_session
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_user(
    session,
    role: Role,
    *,
    email: Optional[str] = None,
    session_rate: Optional[str] = None,
    first_name: str = "Test",
) -> User:
    user = await users_repo.create_user(
        session,
        email=email or f"{role.value}-{os.urandom(4).hex()}@example.com",
        password_hash=PASSWORD_HASH,
        first_name=first_name,
        last_name="User",
        role=role,
        session_rate=Decimal(session_rate) if session_rate is not None else None,
    )
    await session.commit()
    return user


async def set_availability(session, instructor: User, days) -> None:
    """``days``: iterable of (weekday, [("HH:MM", "HH:MM"), ...])."""
    snapshot = AvailabilitySet.from_days(
        [(day, [TimeWindow.parse(s, e) for s, e in windows]) for day, windows in days]
    )
    await availability_repo.replace_for_instructor(
        session, instructor_id=instructor.id, availability=snapshot
    )
    await session.commit()


def auth_headers(user: User) -> dict:
    token = create_access_token(subject=str(user.id), role=user.role)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def instructor(db_session):
    user = await make_user(db_session, Role.INSTRUCTOR, session_rate="80", first_name="Helio")
    await set_availability(db_session, user, [("Monday", [("09:00", "12:00")])])
    return user


@pytest_asyncio.fixture
async def student(db_session):
    return await make_user(db_session, Role.STUDENT, first_name="Rickson")


@pytest_asyncio.fixture
async def other_student(db_session):
    return await make_user(db_session, Role.STUDENT, first_name="Royce")
