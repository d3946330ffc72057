# tests/test_users_service.py
"""
Registration and instructor profile at the service level.
"""
from decimal import Decimal

import pytest
from pydantic import SecretStr

from bjjconnect.core.exceptions import ValidationError
from bjjconnect.modules.users import service as users_service
from bjjconnect.modules.users.models import Role
from bjjconnect.modules.users.schemas import RegisterRequest

from conftest import PASSWORD


def _register_payload(**overrides):
    fields = {
        "email": "roger@example.com",
        "password": SecretStr(PASSWORD),
        "first_name": "Roger",
        "last_name": "Gracie",
        "role": Role.INSTRUCTOR,
        "phone": None,
        "session_rate": Decimal("90.00"),
    }
    fields.update(overrides)
    # Skips schema validation so the database constraints are what rejects it
    return RegisterRequest.model_construct(**fields)


class TestRegisterUser:
    @pytest.mark.asyncio
    async def test_register_instructor(self, db_session):
        result = await users_service.register_user(db_session, _register_payload())
        assert result.token
        assert result.user.role is Role.INSTRUCTOR
        assert result.user.session_rate == 90.0

    @pytest.mark.asyncio
    async def test_rate_is_dropped_for_students(self, db_session):
        result = await users_service.register_user(
            db_session, _register_payload(email="kid@example.com", role=Role.STUDENT)
        )
        assert result.user.session_rate is None

    @pytest.mark.asyncio
    async def test_constraint_violation_is_a_validation_error(self, db_session):
        with pytest.raises(ValidationError) as exc:
            await users_service.register_user(
                db_session, _register_payload(session_rate=Decimal("-5.00"))
            )
        assert exc.value.code == "invalid_user_data"
        await db_session.rollback()
