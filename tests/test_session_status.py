# tests/test_session_status.py
"""
Lifecycle updates and reviews on booked sessions.
"""
import datetime as dt
import uuid

import pytest

from bjjconnect.core.exceptions import Forbidden, InvalidState, NotFound, SlotTaken
from bjjconnect.modules.sessions import repository as sessions_repo
from bjjconnect.modules.sessions import service as sessions_service
from bjjconnect.modules.sessions.models import SessionStatus
from bjjconnect.modules.sessions.schemas import (
    BookSessionRequest,
    ReviewRequest,
    StatusUpdateRequest,
)


@pytest.fixture
def booking(db_session, instructor, student):
    async def _book():
        return await sessions_service.book_session(
            db_session,
            BookSessionRequest(
                instructor_id=instructor.id,
                date=dt.date(2024, 1, 1),
                start_time="10:00",
                end_time="11:00",
                duration=60,
                location_type="other",
                address="Gracie Barra HQ",
                coordinates={"lat": 33.9, "lng": -118.4},
            ),
            student,
        )

    return _book


async def _move(db, record, user, *statuses, reason=None):
    for status in statuses:
        record = await sessions_service.update_status(
            db,
            record.id,
            StatusUpdateRequest(status=status, cancellation_reason=reason),
            user,
        )
    return record


class TestUpdateStatus:
    @pytest.mark.asyncio
    async def test_instructor_confirms_then_completes(self, db_session, instructor, booking):
        record = await booking()
        record = await _move(
            db_session, record, instructor, SessionStatus.CONFIRMED, SessionStatus.COMPLETED
        )
        assert record.status == "completed"

    @pytest.mark.asyncio
    async def test_cancellation_stores_reason(self, db_session, student, booking):
        record = await booking()
        record = await _move(
            db_session, record, student, SessionStatus.CANCELLED, reason="injured"
        )
        assert record.status == "cancelled"
        assert record.cancellation_reason == "injured"

    @pytest.mark.asyncio
    async def test_reason_ignored_for_other_statuses(self, db_session, instructor, booking):
        record = await booking()
        record = await _move(
            db_session, record, instructor, SessionStatus.CONFIRMED, reason="ignored"
        )
        assert record.cancellation_reason is None

    @pytest.mark.asyncio
    async def test_cancelled_session_frees_the_slot(
        self, db_session, student, other_student, booking
    ):
        record = await booking()
        await _move(db_session, record, student, SessionStatus.CANCELLED)

        rebooked = await sessions_service.book_session(
            db_session,
            BookSessionRequest(
                instructor_id=record.instructor_id,
                date=record.session_date,
                start_time="10:00",
                end_time="11:00",
                duration=60,
                location_type="instructor_location",
            ),
            other_student,
        )
        assert rebooked.id != record.id

    @pytest.mark.asyncio
    async def test_outsider_is_forbidden(self, db_session, other_student, booking):
        record = await booking()
        with pytest.raises(Forbidden):
            await _move(db_session, record, other_student, SessionStatus.CANCELLED)

    @pytest.mark.asyncio
    async def test_terminal_session_cannot_be_reopened(self, db_session, student, booking):
        record = await booking()
        record = await _move(db_session, record, student, SessionStatus.CANCELLED)
        with pytest.raises(InvalidState):
            await _move(db_session, record, student, SessionStatus.PENDING)

    @pytest.mark.asyncio
    async def test_permissive_mode(self, db_session, student, booking):
        record = await booking()
        record = await _move(db_session, record, student, SessionStatus.CANCELLED)
        record = await sessions_service.update_status(
            db_session,
            record.id,
            StatusUpdateRequest(status=SessionStatus.PENDING),
            student,
            strict=False,
        )
        assert record.status == "pending"

    @pytest.mark.asyncio
    async def test_reopening_a_rebooked_slot_is_taken(
        self, db_session, student, other_student, booking
    ):
        record = await booking()
        await _move(db_session, record, student, SessionStatus.CANCELLED)
        await sessions_service.book_session(
            db_session,
            BookSessionRequest(
                instructor_id=record.instructor_id,
                date=record.session_date,
                start_time="10:00",
                end_time="11:00",
                duration=60,
                location_type="instructor_location",
            ),
            other_student,
        )

        with pytest.raises(SlotTaken):
            await sessions_service.update_status(
                db_session,
                record.id,
                StatusUpdateRequest(status=SessionStatus.PENDING),
                student,
                strict=False,
            )
        assert (await sessions_repo.get_by_id(db_session, record.id)).status == "cancelled"

    @pytest.mark.asyncio
    async def test_unique_index_rejects_reactivated_duplicate(
        self, db_session, student, other_student, booking
    ):
        record = await booking()
        await _move(db_session, record, student, SessionStatus.CANCELLED)
        await sessions_service.book_session(
            db_session,
            BookSessionRequest(
                instructor_id=record.instructor_id,
                date=record.session_date,
                start_time="10:00",
                end_time="11:00",
                duration=60,
                location_type="instructor_location",
            ),
            other_student,
        )
        await db_session.commit()

        record.status = SessionStatus.CONFIRMED.value
        with pytest.raises(sessions_repo.DuplicateActiveSlotError):
            await sessions_repo.save(db_session, record)
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_unknown_session(self, db_session, student):
        with pytest.raises(NotFound):
            await sessions_service.update_status(
                db_session,
                uuid.uuid4(),
                StatusUpdateRequest(status=SessionStatus.CANCELLED),
                student,
            )


class TestAddReview:
    @pytest.mark.asyncio
    async def test_student_reviews_completed_session(
        self, db_session, instructor, student, booking
    ):
        record = await booking()
        record = await _move(
            db_session, record, instructor, SessionStatus.CONFIRMED, SessionStatus.COMPLETED
        )
        record = await sessions_service.add_review(
            db_session, record.id, ReviewRequest(rating=5, comment="Great guard work"), student
        )
        assert record.review_rating == 5
        assert record.review_comment == "Great guard work"
        assert record.review_created_at is not None

        public = sessions_service.to_public(record)
        assert public.review.rating == 5
        assert public.location.coordinates.lat == pytest.approx(33.9)

    @pytest.mark.asyncio
    async def test_second_review_overwrites_first(self, db_session, instructor, student, booking):
        record = await booking()
        record = await _move(
            db_session, record, instructor, SessionStatus.CONFIRMED, SessionStatus.COMPLETED
        )
        await sessions_service.add_review(db_session, record.id, ReviewRequest(rating=2), student)
        record = await sessions_service.add_review(
            db_session, record.id, ReviewRequest(rating=4), student
        )
        assert record.review_rating == 4

    @pytest.mark.asyncio
    async def test_review_requires_completed(self, db_session, student, booking):
        record = await booking()
        with pytest.raises(InvalidState):
            await sessions_service.add_review(
                db_session, record.id, ReviewRequest(rating=5), student
            )

    @pytest.mark.asyncio
    async def test_cancelled_session_cannot_be_reviewed(self, db_session, student, booking):
        record = await booking()
        record = await _move(db_session, record, student, SessionStatus.CANCELLED)
        with pytest.raises(InvalidState) as exc:
            await sessions_service.add_review(
                db_session, record.id, ReviewRequest(rating=3), student
            )
        assert exc.value.code == "session_not_completed"

    @pytest.mark.asyncio
    async def test_status_is_checked_before_reviewer(self, db_session, instructor, booking):
        record = await booking()
        with pytest.raises(InvalidState):
            await sessions_service.add_review(
                db_session, record.id, ReviewRequest(rating=5), instructor
            )

    @pytest.mark.asyncio
    async def test_instructor_cannot_review(self, db_session, instructor, booking):
        record = await booking()
        record = await _move(
            db_session, record, instructor, SessionStatus.CONFIRMED, SessionStatus.COMPLETED
        )
        with pytest.raises(Forbidden):
            await sessions_service.add_review(
                db_session, record.id, ReviewRequest(rating=1), instructor
            )

    @pytest.mark.asyncio
    async def test_unknown_session(self, db_session, student):
        with pytest.raises(NotFound):
            await sessions_service.add_review(
                db_session, uuid.uuid4(), ReviewRequest(rating=3), student
            )
