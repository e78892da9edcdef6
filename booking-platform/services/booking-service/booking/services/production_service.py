# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Production lifecycle orchestration.
Creation, lookups, and every status change after confirmation
(overtime, completion, cancellation), plus notes and timeline.
"""

from datetime import date, datetime
from typing import Any, Optional

from booking.core.config import settings
from booking.core.exceptions import Forbidden
from booking.core.logging import get_logger
from booking.metrics.prometheus import PRODUCTIONS_BY_STATUS, PRODUCTIONS_CREATED
from booking.models.domain import PRODUCTION_STATUSES, Actor, Production, as_utc, utcnow
from booking.repositories.document_store import new_id
from booking.repositories.history_repository import HistoryRepository
from booking.repositories.production_repository import ProductionRepository
from booking.repositories.staff_repository import StaffRepository
from booking.services.lifecycle import (
    ensure_cancellable,
    ensure_overtime,
    ensure_transition,
    record_transition,
)
from booking.services.notification_service import NotificationService
from booking.services.roles import assigned_staff_ids

logger = get_logger(__name__)

REQUESTING_CAPABILITIES = ("producer", "booking_officer")


class ProductionService:
    def __init__(
        self,
        production_repo: ProductionRepository,
        staff_repo: StaffRepository,
        history_repo: HistoryRepository,
        notifications: NotificationService,
    ) -> None:
        self._productions = production_repo
        self._staff = staff_repo
        self._history = history_repo
        self._notifications = notifications

    # ── Create / read ──

    async def create_production(self, actor: Actor, details: dict[str, Any]) -> Production:
        """Request a new production. It always starts in ``requested``."""
        if actor.capability not in REQUESTING_CAPABILITIES:
            raise Forbidden(actor.id, actor.capability, "request productions")

        production = Production(
            id=new_id(),
            status="requested",
            requested_by_id=actor.id,
            **details,
        )
        await self._productions.add(production)
        PRODUCTIONS_CREATED.labels(venue=production.venue).inc()
        PRODUCTIONS_BY_STATUS.labels(status="requested").inc()
        await self._history.record_event(
            production.id, "requested", actor.id,
            {"venue": production.venue, "date": str(production.production_date)},
        )
        logger.info(
            "Production requested: id=%s, name=%s, venue=%s, by=%s",
            production.id, production.name, production.venue, actor.id,
            extra={"production_id": production.id, "actor_id": actor.id, "status": "requested"},
        )
        return production

    async def get_production(self, production_id: str) -> Production:
        return await self._productions.get(production_id)

    async def list_productions(
        self,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        requested_by_id: Optional[str] = None,
        page: int = 1,
        per_page: Optional[int] = None,
    ) -> dict[str, Any]:
        per_page = min(per_page or settings.DEFAULT_PAGE_SIZE, settings.MAX_PAGE_SIZE)
        productions = await self._productions.find(
            status=status,
            date_from=date_from,
            date_to=date_to,
            requested_by_id=requested_by_id,
        )
        offset = (page - 1) * per_page
        return {
            "total": len(productions),
            "page": page,
            "per_page": per_page,
            "productions": productions[offset:offset + per_page],
        }

    async def staff_schedule(
        self,
        staff_id: str,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        include_cancelled: bool = False,
    ) -> list[Production]:
        """Every production the staff member is rostered on, by start time."""
        await self._staff.get(staff_id)
        statuses = [
            s for s in PRODUCTION_STATUSES
            if include_cancelled or s != "cancelled"
        ]
        return await self._productions.find_for_staff(
            staff_id, statuses=statuses, date_from=date_from, date_to=date_to
        )

    async def summary(self) -> dict[str, Any]:
        by_status = {
            status: await self._productions.count_by_status(status)
            for status in PRODUCTION_STATUSES
        }
        return {"total": sum(by_status.values()), "by_status": by_status}

    # ── Transitions ──

    async def report_overtime(
        self,
        production_id: str,
        actor: Actor,
        actual_end_time: datetime,
        reason: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Production:
        production = await self._productions.get(production_id)
        actual_end_time = as_utc(actual_end_time)
        ensure_overtime(production, actual_end_time, as_utc(now) or utcnow())

        updated = await self._apply(
            production, "overtime", actor,
            {
                "actualEndTime": actual_end_time.isoformat(),
                "overtimeReported": True,
                "overtimeReason": reason,
            },
            {"actual_end_time": actual_end_time.isoformat(), "reason": reason},
        )
        overrun = int((actual_end_time - production.end_time).total_seconds() // 60)
        await self._notifications.notify(
            [updated.requested_by_id],
            "overtime",
            f"'{updated.name}' ran {overrun} min over"
            + (f": {reason}" if reason else ""),
            production_id=updated.id,
        )
        return updated

    async def complete_production(
        self, production_id: str, actor: Actor, completion_notes: Optional[str] = None
    ) -> Production:
        production = await self._productions.get(production_id)
        ensure_transition(production, "completed")

        updated = await self._apply(
            production, "completed", actor,
            {"completionNotes": completion_notes},
            {"completion_notes": completion_notes},
        )
        await self._notifications.notify(
            [updated.requested_by_id],
            "completion",
            f"'{updated.name}' has been marked as completed",
            production_id=updated.id,
        )
        return updated

    async def cancel_production(
        self, production_id: str, actor: Actor, reason: Optional[str] = None
    ) -> Production:
        production = await self._productions.get(production_id)
        ensure_cancellable(production, actor)

        updated = await self._apply(
            production, "cancelled", actor, {"completionNotes": reason}, {"reason": reason}
        )
        await self._notifications.notify(
            assigned_staff_ids(updated.assigned_staff),
            "cancellation",
            f"'{updated.name}' on {updated.production_date} has been cancelled"
            + (f": {reason}" if reason else ""),
            production_id=updated.id,
        )
        return updated

    async def _apply(
        self,
        production: Production,
        to_status: str,
        actor: Actor,
        patch: dict[str, Any],
        detail: dict[str, Any],
    ) -> Production:
        patch = {k: v for k, v in patch.items() if v is not None}
        patch.update({"status": to_status, "updatedAt": utcnow().isoformat()})
        updated = await self._productions.update(production.id, patch)
        record_transition(production.status, to_status)
        await self._history.record_event(
            production.id, to_status, actor.id,
            {"from": production.status, **{k: v for k, v in detail.items() if v is not None}},
        )
        logger.info(
            "Production transition: id=%s, %s->%s, by=%s",
            production.id, production.status, to_status, actor.id,
            extra={"production_id": production.id, "actor_id": actor.id, "status": to_status},
        )
        return updated

    # ── Notes & timeline ──

    async def add_note(self, production_id: str, actor: Actor, content: str) -> dict[str, Any]:
        """Notes are append-only and accepted in every status."""
        await self._productions.get(production_id)
        note = await self._history.add_note(production_id, actor.id, content)
        await self._history.record_event(production_id, "note_added", actor.id, {"note_id": note["id"]})
        return note

    async def get_notes(self, production_id: str) -> list[dict[str, Any]]:
        await self._productions.get(production_id)
        return await self._history.get_notes(production_id)

    async def get_timeline(self, production_id: str, limit: Optional[int] = None) -> list[dict[str, Any]]:
        await self._productions.get(production_id)
        return await self._history.get_timeline(production_id, limit)
