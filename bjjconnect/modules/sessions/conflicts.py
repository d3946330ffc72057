# bjjconnect/modules/sessions/conflicts.py
"""
Named conflict policies for the booking reconciler.

A policy turns the requested slot into a SQL condition selecting the
sessions it collides with. The reconciler adds the "still active" status
filter itself, so a policy only describes the time relation.
"""
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Callable, Dict
from uuid import UUID

from sqlalchemy import ColumnElement, and_

from bjjconnect.modules.sessions.models import TrainingSession


@dataclass(frozen=True)
class Slot:
    instructor_id: UUID
    session_date: dt.date
    start_time: dt.time
    end_time: dt.time


ConflictPredicate = Callable[[Slot], ColumnElement[bool]]


def exact_slot(slot: Slot) -> ColumnElement[bool]:
    """
    Same instructor, date, start and end.

    Overlapping but different windows (10:00-11:00 vs 10:30-11:30) are not
    conflicts under this policy.
    """
    return and_(
        TrainingSession.instructor_id == slot.instructor_id,
        TrainingSession.session_date == slot.session_date,
        TrainingSession.start_time == slot.start_time,
        TrainingSession.end_time == slot.end_time,
    )


def overlapping_slot(slot: Slot) -> ColumnElement[bool]:
    """Same instructor and date, intervals intersect (touching ends do not)."""
    return and_(
        TrainingSession.instructor_id == slot.instructor_id,
        TrainingSession.session_date == slot.session_date,
        TrainingSession.start_time < slot.end_time,
        TrainingSession.end_time > slot.start_time,
    )


CONFLICT_POLICIES: Dict[str, ConflictPredicate] = {
    "exact": exact_slot,
    "overlap": overlapping_slot,
}


def get_conflict_predicate(name: str) -> ConflictPredicate:
    try:
        return CONFLICT_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown conflict policy {name!r}; expected one of {sorted(CONFLICT_POLICIES)}"
        ) from None
