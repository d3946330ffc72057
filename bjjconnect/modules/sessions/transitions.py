# bjjconnect/modules/sessions/transitions.py
from __future__ import annotations

from typing import Dict, FrozenSet

from bjjconnect.core.exceptions import InvalidState
from bjjconnect.modules.sessions.models import SessionStatus

ALLOWED_TRANSITIONS: Dict[SessionStatus, FrozenSet[SessionStatus]] = {
    SessionStatus.PENDING: frozenset({SessionStatus.CONFIRMED, SessionStatus.CANCELLED}),
    SessionStatus.CONFIRMED: frozenset({SessionStatus.COMPLETED, SessionStatus.CANCELLED}),
    SessionStatus.COMPLETED: frozenset(),
    SessionStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, nxt in ALLOWED_TRANSITIONS.items() if not nxt)


def can_transition(current: SessionStatus, new: SessionStatus) -> bool:
    # Re-applying the current status is a no-op, not a transition
    return current is new or new in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: SessionStatus, new: SessionStatus, *, strict: bool = True) -> None:
    if strict and not can_transition(current, new):
        raise InvalidState(
            f"Cannot change a {current.value} session to {new.value}",
            "illegal_transition",
        )
