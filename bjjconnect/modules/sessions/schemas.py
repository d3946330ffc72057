# bjjconnect/modules/sessions/schemas.py
from __future__ import annotations

import datetime as dt
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from bjjconnect.core.schemas import CamelModel, SuccessEnvelope
from bjjconnect.modules.sessions.models import LocationType, PaymentStatus, SessionStatus


class Coordinates(CamelModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class BookSessionRequest(CamelModel):
    """
    Payload to book a session.
    - student is taken from the current user, never from the body.
    - price is computed server side.
    """

    instructor_id: UUID
    date: dt.date
    start_time: str = Field(..., examples=["10:00"])
    end_time: str = Field(..., examples=["11:00"])
    duration: int = Field(..., gt=0, le=24 * 60, description="Minutes")
    location_type: LocationType
    address: Optional[str] = Field(default=None, max_length=255)
    coordinates: Optional[Coordinates] = None
    notes: Optional[str] = Field(default=None, max_length=2000)


class StatusUpdateRequest(CamelModel):
    status: SessionStatus
    cancellation_reason: Optional[str] = Field(default=None, max_length=500)


class ReviewRequest(CamelModel):
    rating: int = Field(..., ge=1, le=5)
    comment: Optional[str] = Field(default=None, max_length=2000)


class SessionLocation(CamelModel):
    type: LocationType
    address: Optional[str] = None
    coordinates: Optional[Coordinates] = None


class SessionReview(CamelModel):
    rating: int
    comment: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class PartySummary(CamelModel):
    id: UUID
    first_name: str
    last_name: str


class SessionPublic(CamelModel):
    id: UUID
    instructor_id: UUID
    student_id: UUID
    instructor: PartySummary
    student: PartySummary
    date: dt.date
    start_time: str
    end_time: str
    duration: int
    location: SessionLocation
    status: SessionStatus
    price: float
    payment_status: PaymentStatus
    notes: Optional[str] = None
    cancellation_reason: Optional[str] = None
    review: Optional[SessionReview] = None
    created_at: dt.datetime
    updated_at: dt.datetime


class SessionResponse(SuccessEnvelope):
    session: SessionPublic


class SessionListResponse(SuccessEnvelope):
    sessions: List[SessionPublic]
