# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Per-recipient notification records.
"""

from typing import Optional

from booking.core.exceptions import NotFound
from booking.models.domain import Notification
from booking.repositories.document_store import DocumentStore, Filter, Order

COLLECTION = "notifications"


class NotificationRepository:
    def __init__(self, store: DocumentStore):
        self._store = store

    async def get(self, notification_id: str) -> Notification:
        doc = await self._store.get(COLLECTION, notification_id)
        if doc is None:
            raise NotFound(COLLECTION, notification_id)
        return Notification.from_document(doc)

    async def list_for_recipient(
        self,
        recipient_id: str,
        unread_only: bool = False,
        limit: Optional[int] = None,
    ) -> list[Notification]:
        filters = [Filter("recipientId", "==", recipient_id)]
        if unread_only:
            filters.append(Filter("read", "==", False))
        docs = await self._store.query(
            COLLECTION, filters, [Order("createdAt", descending=True)], limit=limit
        )
        return [Notification.from_document(d) for d in docs]

    async def count_unread(self, recipient_id: str) -> int:
        return await self._store.count(
            COLLECTION,
            [Filter("recipientId", "==", recipient_id), Filter("read", "==", False)],
        )

    async def add(self, notification: Notification) -> Notification:
        await self._store.add(COLLECTION, notification.to_document())
        return notification

    async def mark_read(self, notification_id: str) -> None:
        await self._store.update(COLLECTION, notification_id, {"read": True})
