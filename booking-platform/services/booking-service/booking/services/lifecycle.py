# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Production status state machine — guard rules and transition bookkeeping.

    requested ─► confirmed ─► completed
        │            │  └───► overtime ─► completed
        │            │            └─────► cancelled
        └────────────┴──────► cancelled

``completed`` and ``cancelled`` are terminal.
"""

from datetime import datetime
from typing import Optional

from booking.core.config import settings
from booking.core.exceptions import InvalidTransition
from booking.metrics.prometheus import (
    PRODUCTIONS_BY_STATUS,
    REJECTED_TRANSITIONS,
    STATUS_TRANSITIONS,
)
from booking.models.domain import Actor, Production

# Allowed transitions: {current_status: set_of_next_statuses}
ALLOWED_TRANSITIONS: dict[str, set[str]] = {
    "requested": {"confirmed", "cancelled"},
    "confirmed": {"overtime", "completed", "cancelled"},
    "overtime":  {"completed", "cancelled"},
    "completed": set(),  # terminal
    "cancelled": set(),  # terminal
}

TERMINAL_STATUSES = frozenset(s for s, nxt in ALLOWED_TRANSITIONS.items() if not nxt)

# Statuses in which a production occupies its crew
BLOCKING_STATUSES = ("confirmed", "overtime")

# Assignment is accepted on a fresh request or as a re-assignment
ASSIGNABLE_STATUSES = ("requested", "confirmed")


def _reject(production: Production, to_status: str, reason: str) -> InvalidTransition:
    REJECTED_TRANSITIONS.labels(from_status=production.status, to_status=to_status).inc()
    return InvalidTransition(production.id, production.status, to_status, reason=reason)


def can_transition(from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def ensure_transition(production: Production, to_status: str) -> None:
    """Raise InvalidTransition unless ``to_status`` is reachable from the current status."""
    if not can_transition(production.status, to_status):
        allowed = sorted(ALLOWED_TRANSITIONS.get(production.status, set()))
        raise _reject(
            production,
            to_status,
            reason=f"allowed next statuses: {allowed or 'none (terminal)'}",
        )


def ensure_assignable(production: Production, actor: Actor) -> None:
    if not actor.is_booking_officer:
        raise _reject(
            production, "confirmed",
            reason="only a booking officer may assign staff",
        )
    if production.status not in ASSIGNABLE_STATUSES:
        raise _reject(
            production, "confirmed",
            reason="staff can only be assigned to requested or confirmed productions",
        )


def ensure_cancellable(production: Production, actor: Actor) -> None:
    ensure_transition(production, "cancelled")
    if not actor.is_booking_officer:
        raise _reject(
            production, "cancelled",
            reason="only a booking officer may cancel a production",
        )


def ensure_overtime(
    production: Production,
    actual_end_time: datetime,
    now: datetime,
    same_day_only: Optional[bool] = None,
) -> None:
    """Guard for confirmed ─► overtime."""
    ensure_transition(production, "overtime")
    if actual_end_time <= production.end_time:
        raise _reject(
            production, "overtime",
            reason="actualEndTime must be after the scheduled endTime",
        )
    if same_day_only is None:
        same_day_only = settings.OVERTIME_SAME_DAY_ONLY
    if same_day_only and now.date() != production.production_date:
        raise _reject(
            production, "overtime",
            reason=f"overtime can only be reported on the production day ({production.production_date})",
        )


def record_transition(from_status: str, to_status: str) -> None:
    """Update transition counters and the per-status gauge after a committed change."""
    if from_status == to_status:
        return
    STATUS_TRANSITIONS.labels(from_status=from_status, to_status=to_status).inc()
    PRODUCTIONS_BY_STATUS.labels(status=from_status).dec()
    PRODUCTIONS_BY_STATUS.labels(status=to_status).inc()
