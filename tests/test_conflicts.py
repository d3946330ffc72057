# tests/test_conflicts.py
"""
Conflict policies evaluated against stored sessions.
"""
import datetime as dt
from decimal import Decimal

import pytest

from bjjconnect.modules.sessions import repository as sessions_repo
from bjjconnect.modules.sessions.conflicts import (
    Slot,
    exact_slot,
    get_conflict_predicate,
    overlapping_slot,
)
from bjjconnect.modules.sessions.models import SessionStatus, TrainingSession

DAY = dt.date(2024, 1, 1)


def _slot(instructor, start, end, day=DAY):
    return Slot(
        instructor_id=instructor.id,
        session_date=day,
        start_time=dt.time(*start),
        end_time=dt.time(*end),
    )


async def _store(db, instructor, student, start, end, status=SessionStatus.PENDING):
    record = TrainingSession(
        instructor_id=instructor.id,
        student_id=student.id,
        session_date=DAY,
        start_time=dt.time(*start),
        end_time=dt.time(*end),
        duration_minutes=(end[0] * 60 + end[1]) - (start[0] * 60 + start[1]),
        location_type="instructor_location",
        status=status.value,
        price=Decimal("80.00"),
    )
    return await sessions_repo.insert(db, record)


class TestConflictPolicies:
    @pytest.mark.asyncio
    async def test_exact_policy_matches_identical_slot_only(self, db_session, instructor, student):
        await _store(db_session, instructor, student, (10, 0), (11, 0))

        assert await sessions_repo.find_conflict(
            db_session, _slot(instructor, (10, 0), (11, 0)), exact_slot
        )
        assert not await sessions_repo.find_conflict(
            db_session, _slot(instructor, (10, 30), (11, 30)), exact_slot
        )

    @pytest.mark.asyncio
    async def test_overlap_policy_matches_intersections(self, db_session, instructor, student):
        await _store(db_session, instructor, student, (10, 0), (11, 0))

        assert await sessions_repo.find_conflict(
            db_session, _slot(instructor, (10, 30), (11, 30)), overlapping_slot
        )
        # Touching ends do not overlap
        assert not await sessions_repo.find_conflict(
            db_session, _slot(instructor, (11, 0), (11, 30)), overlapping_slot
        )

    @pytest.mark.asyncio
    async def test_terminal_sessions_never_conflict(self, db_session, instructor, student):
        await _store(
            db_session, instructor, student, (10, 0), (11, 0), status=SessionStatus.CANCELLED
        )
        assert not await sessions_repo.find_conflict(
            db_session, _slot(instructor, (10, 0), (11, 0)), exact_slot
        )

    @pytest.mark.asyncio
    async def test_other_dates_do_not_conflict(self, db_session, instructor, student):
        await _store(db_session, instructor, student, (10, 0), (11, 0))
        other_day = _slot(instructor, (10, 0), (11, 0), day=dt.date(2024, 1, 8))
        assert not await sessions_repo.find_conflict(db_session, other_day, overlapping_slot)

    @pytest.mark.asyncio
    async def test_unique_index_rejects_second_active_slot(self, db_session, instructor, student):
        await _store(db_session, instructor, student, (10, 0), (11, 0))
        with pytest.raises(sessions_repo.DuplicateActiveSlotError):
            await _store(db_session, instructor, student, (10, 0), (11, 0))
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_unique_index_ignores_cancelled_rows(self, db_session, instructor, student):
        await _store(
            db_session, instructor, student, (10, 0), (11, 0), status=SessionStatus.CANCELLED
        )
        record = await _store(db_session, instructor, student, (10, 0), (11, 0))
        assert record.status == "pending"


class TestPolicyLookup:
    def test_known_names(self):
        assert get_conflict_predicate("exact") is exact_slot
        assert get_conflict_predicate("overlap") is overlapping_slot

    def test_unknown_name(self):
        with pytest.raises(ValueError):
            get_conflict_predicate("fuzzy")
