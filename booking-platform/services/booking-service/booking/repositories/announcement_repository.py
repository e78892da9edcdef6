# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Announcement board data access.
Pinned posts first, then newest first.
"""

from typing import Any, Optional, Sequence

from booking.core.exceptions import NotFound
from booking.models.domain import Announcement
from booking.repositories.document_store import DocumentStore, Filter, Order

COLLECTION = "announcements"
BOARD_ORDER = (Order("isPinned", descending=True), Order("createdAt", descending=True))


class AnnouncementRepository:
    def __init__(self, store: DocumentStore):
        self._store = store

    async def get(self, announcement_id: str) -> Announcement:
        doc = await self._store.get(COLLECTION, announcement_id)
        if doc is None:
            raise NotFound(COLLECTION, announcement_id)
        return Announcement.from_document(doc)

    async def find(self, target_groups: Optional[Sequence[str]] = None) -> list[Announcement]:
        filters: list[Filter] = []
        if target_groups:
            filters.append(Filter("targetGroup", "in", list(target_groups)))
        docs = await self._store.query(COLLECTION, filters, BOARD_ORDER)
        return [Announcement.from_document(d) for d in docs]

    async def add(self, announcement: Announcement) -> Announcement:
        await self._store.add(COLLECTION, announcement.to_document())
        return announcement

    async def update(self, announcement_id: str, patch: dict[str, Any]) -> Announcement:
        await self._store.update(COLLECTION, announcement_id, patch)
        return await self.get(announcement_id)

    async def delete(self, announcement_id: str) -> None:
        await self._store.delete(COLLECTION, announcement_id)
