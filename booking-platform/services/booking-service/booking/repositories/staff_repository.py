# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Staff directory data access.
Staff members are never deleted — only created and updated.
"""

from typing import Any, Optional

from booking.core.exceptions import NotFound
from booking.models.domain import StaffMember
from booking.repositories.document_store import DocumentStore, Filter, Order

COLLECTION = "staff"


class StaffRepository:
    def __init__(self, store: DocumentStore):
        self._store = store

    # ── Read ──

    async def get(self, staff_id: str) -> StaffMember:
        doc = await self._store.get(COLLECTION, staff_id)
        if doc is None:
            raise NotFound(COLLECTION, staff_id)
        return StaffMember.from_document(doc)

    async def exists(self, staff_id: str) -> bool:
        return await self._store.get(COLLECTION, staff_id) is not None

    async def find(self, role: Optional[str] = None) -> list[StaffMember]:
        filters = [Filter("roles", "array-contains", role)] if role else []
        docs = await self._store.query(COLLECTION, filters, [Order("name")])
        return [StaffMember.from_document(d) for d in docs]

    async def find_by_email(self, email: str) -> Optional[StaffMember]:
        docs = await self._store.query(COLLECTION, [Filter("email", "==", email)], limit=1)
        return StaffMember.from_document(docs[0]) if docs else None

    # ── Write ──

    async def add(self, member: StaffMember) -> StaffMember:
        await self._store.add(COLLECTION, member.to_document())
        return member

    async def update(self, staff_id: str, patch: dict[str, Any]) -> StaffMember:
        await self._store.update(COLLECTION, staff_id, patch)
        return await self.get(staff_id)
