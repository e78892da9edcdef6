# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Staff assignment coordinator.

Checks every proposed crew member against their other bookings, then commits
the roster. Conflicts are advisory: they are returned to the caller (who
decides whether to "Assign Anyway") and never block the commit.
"""

from dataclasses import dataclass, field

from booking.core.logging import get_logger
from booking.metrics.prometheus import ASSIGNMENTS_TOTAL, FORCED_CONFLICTS
from booking.models.domain import Actor, AssignedStaff, Production, utcnow
from booking.repositories.history_repository import HistoryRepository
from booking.repositories.production_repository import ProductionRepository
from booking.services.availability import AvailabilityChecker
from booking.services.lifecycle import ensure_assignable, record_transition
from booking.services.notification_service import NotificationService
from booking.services.roles import assigned_staff_ids

logger = get_logger(__name__)


@dataclass
class AssignmentResult:
    production: Production
    # staff id -> overlapping confirmed/overtime productions
    conflicts: dict[str, list[Production]] = field(default_factory=dict)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


class StaffAssignmentCoordinator:
    def __init__(
        self,
        production_repo: ProductionRepository,
        history_repo: HistoryRepository,
        availability: AvailabilityChecker,
        notifications: NotificationService,
    ) -> None:
        self._productions = production_repo
        self._history = history_repo
        self._availability = availability
        self._notifications = notifications

    async def review_assignment(
        self, production_id: str, proposed: AssignedStaff
    ) -> dict[str, list[Production]]:
        """Conflict map for a proposed roster, without committing anything."""
        production = await self._productions.get(production_id)
        return await self._find_conflicts(production, proposed)

    async def assign_staff(
        self, production_id: str, proposed: AssignedStaff, actor: Actor
    ) -> AssignmentResult:
        production = await self._productions.get(production_id)
        ensure_assignable(production, actor)

        conflicts = await self._find_conflicts(production, proposed)
        if conflicts:
            FORCED_CONFLICTS.inc()
            logger.warning(
                "Assigning despite conflicts: production=%s, staff=%s",
                production.id, sorted(conflicts),
                extra={"production_id": production.id, "actor_id": actor.id},
            )

        previous_status = production.status
        updated = await self._productions.update(
            production.id,
            {
                # full overwrite: omitted slots are cleared
                "assignedStaff": proposed.to_document(),
                "processedById": actor.id,
                "status": "confirmed",
                "updatedAt": utcnow().isoformat(),
            },
        )
        record_transition(previous_status, "confirmed")
        ASSIGNMENTS_TOTAL.inc()

        staff_ids = assigned_staff_ids(proposed)
        await self._history.record_event(
            updated.id,
            "staff_assigned" if previous_status == "confirmed" else "confirmed",
            actor.id,
            {"staff": staff_ids, "conflicts": sorted(conflicts)},
        )
        logger.info(
            "Staff assigned: production=%s, by=%s, staff=%d, status=%s->confirmed",
            updated.id, actor.id, len(staff_ids), previous_status,
            extra={"production_id": updated.id, "actor_id": actor.id, "status": "confirmed"},
        )

        await self._notifications.notify(
            staff_ids,
            "assignment",
            f"You have been assigned to '{updated.name}' on {updated.production_date}",
            production_id=updated.id,
        )
        await self._notifications.notify(
            [updated.requested_by_id],
            "confirmation",
            f"Your production '{updated.name}' has been confirmed",
            production_id=updated.id,
        )
        return AssignmentResult(production=updated, conflicts=conflicts)

    async def _find_conflicts(
        self, production: Production, proposed: AssignedStaff
    ) -> dict[str, list[Production]]:
        results = await self._availability.check_many(
            assigned_staff_ids(proposed),
            production.interval,
            exclude_production_id=production.id,
        )
        return {
            staff_id: result.conflicts
            for staff_id, result in results.items()
            if not result.available
        }
