# bjjconnect/modules/availability/domain.py
"""
Recurring weekly availability of an instructor.

Times of day are integer minutes since midnight; the wire format is
``"HH:MM"``. An availability is an immutable snapshot: updates build a new
``AvailabilitySet`` and replace the stored one as a whole.
"""
from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from bjjconnect.core.exceptions import ValidationError

WEEKDAYS: tuple[str, ...] = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)
_WEEKDAY_LOOKUP = {name.lower(): name for name in WEEKDAYS}

MINUTES_PER_DAY = 24 * 60
_TIME_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*$")


def weekday_name(on_date: dt.date) -> str:
    """Gregorian weekday name, independent of the process locale."""
    return WEEKDAYS[on_date.weekday()]


def normalize_weekday(name: str) -> str:
    try:
        return _WEEKDAY_LOOKUP[name.strip().lower()]
    except (KeyError, AttributeError):
        raise ValidationError(f"Unknown day of week: {name!r}", "invalid_weekday")


def parse_time_of_day(value: str | int | dt.time) -> int:
    """
    ``"9:05"`` / ``"09:05"`` / ``time(9, 5)`` -> 545.

    Parsing to minutes avoids the string-comparison trap where ``"9:00"``
    sorts after ``"10:00"``.
    """
    if isinstance(value, bool):
        raise ValidationError(f"Invalid time of day: {value!r}", "invalid_time")
    if isinstance(value, int):
        minutes = value
    elif isinstance(value, dt.time):
        minutes = value.hour * 60 + value.minute
    else:
        match = _TIME_RE.match(value or "")
        if not match:
            raise ValidationError(f"Invalid time of day: {value!r}", "invalid_time")
        hours, mins = int(match.group(1)), int(match.group(2))
        if hours > 23 or mins > 59:
            raise ValidationError(f"Invalid time of day: {value!r}", "invalid_time")
        minutes = hours * 60 + mins
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValidationError(f"Invalid time of day: {value!r}", "invalid_time")
    return minutes


def format_time_of_day(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def to_time(minutes: int) -> dt.time:
    return dt.time(minutes // 60, minutes % 60)


@dataclass(frozen=True, order=True)
class TimeWindow:
    """Half-open interval [start, end) in minutes of day."""

    start: int
    end: int

    @classmethod
    def parse(cls, start: str | int | dt.time, end: str | int | dt.time) -> "TimeWindow":
        return cls(parse_time_of_day(start), parse_time_of_day(end))

    @property
    def minutes(self) -> int:
        return self.end - self.start

    def is_valid(self) -> bool:
        return self.start < self.end

    def contains(self, other: "TimeWindow") -> bool:
        return self.start <= other.start and self.end >= other.end

    def overlaps(self, other: "TimeWindow") -> bool:
        return self.start < other.end and other.start < self.end

    def __str__(self) -> str:
        return f"{format_time_of_day(self.start)}-{format_time_of_day(self.end)}"


@dataclass(frozen=True)
class AvailabilitySet:
    """Weekday name -> sorted, non-overlapping windows."""

    days: Mapping[str, tuple[TimeWindow, ...]] = field(default_factory=dict)

    @classmethod
    def from_days(
        cls,
        days: Iterable[tuple[str, Sequence[TimeWindow]]],
        *,
        strict: bool = True,
    ) -> "AvailabilitySet":
        """
        Build a snapshot from (weekday, windows) pairs.

        With ``strict`` every window must satisfy start < end, windows of one
        weekday must not overlap (touching is fine) and a weekday may only be
        listed once. Days without windows are dropped.
        """
        collected: dict[str, tuple[TimeWindow, ...]] = {}
        for raw_day, windows in days:
            day = normalize_weekday(raw_day)
            if strict and day in collected:
                raise ValidationError(f"{day} is listed more than once", "duplicate_weekday")
            ordered = sorted([*collected.get(day, ()), *windows])
            if strict:
                _check_windows(day, ordered)
            if ordered:
                collected[day] = tuple(ordered)
        # Calendar order keeps serialisation stable
        return cls({d: collected[d] for d in WEEKDAYS if d in collected})

    def windows_for(self, day: str) -> tuple[TimeWindow, ...]:
        return self.days.get(day, ())

    def is_empty(self) -> bool:
        return not self.days

    def to_days(self) -> list[tuple[str, tuple[TimeWindow, ...]]]:
        return list(self.days.items())


def _check_windows(day: str, ordered: Sequence[TimeWindow]) -> None:
    for window in ordered:
        if not window.is_valid():
            raise ValidationError(
                f"{day} window {window} must end after it starts", "invalid_window"
            )
    for prev, nxt in zip(ordered, ordered[1:]):
        if prev.overlaps(nxt):
            raise ValidationError(
                f"{day} windows {prev} and {nxt} overlap", "overlapping_windows"
            )


def is_available(
    availability: AvailabilitySet,
    on_date: dt.date,
    start: str | int | dt.time,
    end: str | int | dt.time,
) -> bool:
    """
    True when one registered window of the date's weekday fully contains
    [start, end).

    Containment is checked per window, not against the union: a request
    spanning two adjacent windows (09:00-10:00 + 10:00-11:00) is rejected.
    """
    windows = availability.windows_for(weekday_name(on_date))
    if not windows:
        return False
    requested = TimeWindow.parse(start, end)
    return any(window.contains(requested) for window in windows)
