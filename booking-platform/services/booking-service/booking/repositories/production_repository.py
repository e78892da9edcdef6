# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Production data access.
Encapsulates every read/write on the ``productions`` collection.
NO business rules here — pure CRUD and queries.
"""

from datetime import date
from typing import Any, Optional, Sequence

from booking.core.exceptions import NotFound
from booking.models.domain import Production
from booking.repositories.document_store import DocumentStore, Filter, Order
from booking.services.roles import assigned_staff_ids

COLLECTION = "productions"
CHRONOLOGICAL = (Order("date"), Order("startTime"))


class ProductionRepository:
    def __init__(self, store: DocumentStore):
        self._store = store

    # ── Read ──

    async def get(self, production_id: str) -> Production:
        doc = await self._store.get(COLLECTION, production_id)
        if doc is None:
            raise NotFound(COLLECTION, production_id)
        return Production.from_document(doc)

    async def find(
        self,
        status: Optional[str] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        requested_by_id: Optional[str] = None,
    ) -> list[Production]:
        filters: list[Filter] = []
        if status:
            filters.append(Filter("status", "==", status))
        if date_from:
            filters.append(Filter("date", ">=", date_from.isoformat()))
        if date_to:
            filters.append(Filter("date", "<=", date_to.isoformat()))
        if requested_by_id:
            filters.append(Filter("requestedById", "==", requested_by_id))
        docs = await self._store.query(COLLECTION, filters, CHRONOLOGICAL)
        return [Production.from_document(d) for d in docs]

    async def find_for_staff(
        self,
        staff_id: str,
        statuses: Optional[Sequence[str]] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> list[Production]:
        """Productions where ``staff_id`` holds any role slot.

        One store query narrowed by status and date; slot membership is
        checked on the returned documents.
        """
        filters: list[Filter] = []
        if statuses:
            filters.append(Filter("status", "in", list(statuses)))
        if date_from:
            filters.append(Filter("date", ">=", date_from.isoformat()))
        if date_to:
            filters.append(Filter("date", "<=", date_to.isoformat()))

        docs = await self._store.query(COLLECTION, filters)
        productions = [
            p for p in (Production.from_document(d) for d in docs)
            if staff_id in assigned_staff_ids(p.assigned_staff)
        ]
        productions.sort(key=lambda p: (p.start_time, p.id))
        return productions

    async def count_by_status(self, status: str) -> int:
        return await self._store.count(COLLECTION, [Filter("status", "==", status)])

    # ── Write ──

    async def add(self, production: Production) -> Production:
        await self._store.add(COLLECTION, production.to_document())
        return production

    async def update(self, production_id: str, patch: dict[str, Any]) -> Production:
        await self._store.update(COLLECTION, production_id, patch)
        return await self.get(production_id)
