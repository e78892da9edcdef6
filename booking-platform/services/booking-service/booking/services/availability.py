# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Availability checker — is a staff member free for a candidate slot?

Read-only: safe to call repeatedly and concurrently.
"""

import asyncio
from typing import Iterable, Optional

from booking.core.logging import get_logger
from booking.metrics.prometheus import AVAILABILITY_CHECKS
from booking.models.domain import AvailabilityResult
from booking.repositories.production_repository import ProductionRepository
from booking.repositories.staff_repository import StaffRepository
from booking.services.interval import TimeInterval
from booking.services.lifecycle import BLOCKING_STATUSES

logger = get_logger(__name__)


class AvailabilityChecker:
    """Finds confirmed or overtime productions that overlap a candidate interval."""

    def __init__(
        self,
        production_repo: ProductionRepository,
        staff_repo: StaffRepository,
    ) -> None:
        self._productions = production_repo
        self._staff = staff_repo

    async def check_availability(
        self,
        staff_id: str,
        candidate: TimeInterval,
        exclude_production_id: Optional[str] = None,
    ) -> AvailabilityResult:
        """Report every blocking production for ``staff_id`` that overlaps ``candidate``.

        Raises NotFound for an unknown staff id.
        """
        await self._staff.get(staff_id)

        booked = await self._productions.find_for_staff(staff_id, statuses=BLOCKING_STATUSES)
        conflicts = [
            p for p in booked
            if p.id != exclude_production_id and p.interval.overlaps(candidate)
        ]

        AVAILABILITY_CHECKS.labels(outcome="conflict" if conflicts else "available").inc()
        if conflicts:
            logger.info(
                "Availability conflict: staff=%s, window=%s..%s, conflicts=%s",
                staff_id,
                candidate.start.isoformat(),
                candidate.end.isoformat(),
                [p.id for p in conflicts],
            )
        return AvailabilityResult(
            staff_id=staff_id,
            available=not conflicts,
            conflicts=conflicts,
        )

    async def check_many(
        self,
        staff_ids: Iterable[str],
        candidate: TimeInterval,
        exclude_production_id: Optional[str] = None,
    ) -> dict[str, AvailabilityResult]:
        """Run independent checks concurrently; result keyed by staff id."""
        unique_ids = list(dict.fromkeys(staff_ids))
        results = await asyncio.gather(
            *(
                self.check_availability(staff_id, candidate, exclude_production_id)
                for staff_id in unique_ids
            )
        )
        return dict(zip(unique_ids, results))
