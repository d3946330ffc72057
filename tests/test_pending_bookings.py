# tests/test_pending_bookings.py
"""
Booking requests held for visitors who are not signed in yet.
"""
import datetime as dt
import uuid

import pytest
from sqlalchemy import func, select

from bjjconnect.core.config import settings
from bjjconnect.core.exceptions import InstructorUnavailable, InvalidState, NotFound
from bjjconnect.db.base import utcnow
from bjjconnect.modules.pending import service as pending_service
from bjjconnect.modules.pending.models import PendingBooking
from bjjconnect.modules.sessions.schemas import BookSessionRequest


def _request(instructor_id, start="10:00", end="11:00"):
    return BookSessionRequest(
        instructor_id=instructor_id,
        date=dt.date(2024, 1, 1),
        start_time=start,
        end_time=end,
        duration=60,
        location_type="student_location",
        notes="first class",
    )


async def _count(db):
    return (await db.execute(select(func.count()).select_from(PendingBooking))).scalar_one()


class TestStage:
    @pytest.mark.asyncio
    async def test_stage_sets_expiry(self, db_session, instructor):
        now = utcnow()
        record = await pending_service.stage(db_session, _request(instructor.id), now=now)

        assert isinstance(record.token, uuid.UUID)
        assert record.expires_at == now + dt.timedelta(minutes=settings.PENDING_BOOKING_TTL_MINUTES)

        public = pending_service.to_public(record)
        assert public.start_time == "10:00"
        assert public.notes == "first class"
        dumped = public.model_dump(by_alias=True)
        assert "expiresAt" in dumped and "instructorId" in dumped

    @pytest.mark.asyncio
    async def test_stage_unknown_instructor(self, db_session):
        with pytest.raises(NotFound):
            await pending_service.stage(db_session, _request(uuid.uuid4()))

    @pytest.mark.asyncio
    async def test_stage_purges_expired_records(self, db_session, instructor):
        long_ago = utcnow() - dt.timedelta(days=1)
        await pending_service.stage(db_session, _request(instructor.id), now=long_ago)
        assert await _count(db_session) == 1

        await pending_service.stage(db_session, _request(instructor.id))
        assert await _count(db_session) == 1


class TestGet:
    @pytest.mark.asyncio
    async def test_get_live_record(self, db_session, instructor):
        record = await pending_service.stage(db_session, _request(instructor.id))
        fetched = await pending_service.get(db_session, record.token)
        assert fetched.token == record.token

    @pytest.mark.asyncio
    async def test_get_missing(self, db_session):
        with pytest.raises(NotFound):
            await pending_service.get(db_session, uuid.uuid4())

    @pytest.mark.asyncio
    async def test_get_expired(self, db_session, instructor):
        record = await pending_service.stage(db_session, _request(instructor.id))
        later = record.expires_at + dt.timedelta(seconds=1)
        with pytest.raises(InvalidState) as exc:
            await pending_service.get(db_session, record.token, now=later)
        assert exc.value.code == "pending_booking_expired"


class TestConfirm:
    @pytest.mark.asyncio
    async def test_confirm_books_and_consumes_token(self, db_session, instructor, student):
        record = await pending_service.stage(db_session, _request(instructor.id))
        token = record.token

        booked = await pending_service.confirm(db_session, token, student)

        assert booked.student_id == student.id
        assert booked.status == "pending"
        assert booked.notes == "first class"
        with pytest.raises(NotFound):
            await pending_service.get(db_session, token)

    @pytest.mark.asyncio
    async def test_failed_booking_keeps_token(self, db_session, instructor, student):
        record = await pending_service.stage(
            db_session, _request(instructor.id, start="13:00", end="14:00")
        )
        with pytest.raises(InstructorUnavailable):
            await pending_service.confirm(db_session, record.token, student)
        assert await pending_service.get(db_session, record.token)

    @pytest.mark.asyncio
    async def test_confirm_expired(self, db_session, instructor, student):
        record = await pending_service.stage(db_session, _request(instructor.id))
        with pytest.raises(InvalidState):
            await pending_service.confirm(
                db_session,
                record.token,
                student,
                now=record.expires_at + dt.timedelta(minutes=1),
            )
