# tests/test_availability_service.py
import uuid

import pytest
from sqlalchemy import select

from bjjconnect.core.exceptions import Forbidden, NotFound, ValidationError
from bjjconnect.modules.availability import service as availability_service
from bjjconnect.modules.availability.models import AvailabilityWindow
from bjjconnect.modules.availability.schemas import AvailabilityDay, TimeSlot


def _day(name, *slots):
    return AvailabilityDay(
        day=name, time_slots=[TimeSlot(start_time=s, end_time=e) for s, e in slots]
    )


class TestReplaceAvailability:
    @pytest.mark.asyncio
    async def test_replaces_whole_snapshot(self, db_session, instructor):
        snapshot = await availability_service.replace_availability(
            db_session,
            instructor,
            [_day("Saturday", ("10:00", "12:00")), _day("Tuesday", ("18:00", "19:30"))],
        )
        assert [day for day, _ in snapshot.to_days()] == ["Tuesday", "Saturday"]

        stored = await availability_service.get_availability(db_session, instructor.id)
        assert stored == snapshot
        # The Monday window from the fixture is gone
        assert stored.windows_for("Monday") == ()

    @pytest.mark.asyncio
    async def test_invalid_snapshot_keeps_previous_rows(self, db_session, instructor):
        with pytest.raises(ValidationError):
            await availability_service.replace_availability(
                db_session, instructor, [_day("Monday", ("12:00", "10:00"))]
            )
        rows = (await db_session.execute(select(AvailabilityWindow))).scalars().all()
        assert len(rows) == 1

    @pytest.mark.asyncio
    async def test_students_have_no_availability(self, db_session, student):
        with pytest.raises(Forbidden):
            await availability_service.replace_availability(db_session, student, [])

    @pytest.mark.asyncio
    async def test_unknown_instructor(self, db_session, student):
        with pytest.raises(NotFound):
            await availability_service.get_availability(db_session, uuid.uuid4())
        with pytest.raises(NotFound):
            await availability_service.get_availability(db_session, student.id)
