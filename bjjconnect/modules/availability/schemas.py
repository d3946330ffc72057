# bjjconnect/modules/availability/schemas.py
from __future__ import annotations

from typing import List

from pydantic import Field

from bjjconnect.core.schemas import CamelModel, SuccessEnvelope
from bjjconnect.modules.availability.domain import (
    AvailabilitySet,
    TimeWindow,
    format_time_of_day,
)


class TimeSlot(CamelModel):
    start_time: str = Field(..., examples=["09:00"])
    end_time: str = Field(..., examples=["12:00"])


class AvailabilityDay(CamelModel):
    day: str = Field(..., examples=["Monday"])
    time_slots: List[TimeSlot] = Field(default_factory=list)


class AvailabilityUpdateRequest(CamelModel):
    """
    Replaces the instructor's whole availability; days left out become
    unavailable.
    """

    availability: List[AvailabilityDay]


class AvailabilityResponse(SuccessEnvelope):
    availability: List[AvailabilityDay]


def to_days(availability: AvailabilitySet) -> list[AvailabilityDay]:
    return [
        AvailabilityDay(
            day=day,
            time_slots=[
                TimeSlot(
                    start_time=format_time_of_day(w.start),
                    end_time=format_time_of_day(w.end),
                )
                for w in windows
            ],
        )
        for day, windows in availability.to_days()
    ]


def to_windows(payload: List[AvailabilityDay]) -> list[tuple[str, list[TimeWindow]]]:
    return [
        (d.day, [TimeWindow.parse(s.start_time, s.end_time) for s in d.time_slots])
        for d in payload
    ]
