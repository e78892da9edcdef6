# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Production timeline and notes.
Both collections are append-only audit trails keyed by production id.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from booking.core.config import settings
from booking.repositories.document_store import DocumentStore, Filter, Order, new_id

TIMELINE = "production_timeline"
NOTES = "production_notes"


class HistoryRepository:
    def __init__(self, store: DocumentStore):
        self._store = store

    # ── Timeline ──

    async def record_event(
        self,
        production_id: str,
        event_type: str,
        actor_id: str = "system",
        detail: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        event: dict[str, Any] = {
            "id": new_id(),
            "productionId": production_id,
            "eventType": event_type,
            "actorId": actor_id,
            "detail": detail or {},
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        await self._store.add(TIMELINE, event)
        return event

    async def get_timeline(
        self, production_id: str, limit: Optional[int] = None
    ) -> list[dict[str, Any]]:
        events = await self._store.query(
            TIMELINE,
            [Filter("productionId", "==", production_id)],
            [Order("createdAt")],
        )
        effective_limit = limit or settings.DEFAULT_TIMELINE_LIMIT
        return events[-effective_limit:]

    # ── Notes ──

    async def add_note(self, production_id: str, author_id: str, content: str) -> dict[str, Any]:
        note: dict[str, Any] = {
            "id": new_id(),
            "productionId": production_id,
            "authorId": author_id,
            "content": content,
            "createdAt": datetime.now(timezone.utc).isoformat(),
        }
        await self._store.add(NOTES, note)
        return note

    async def get_notes(self, production_id: str) -> list[dict[str, Any]]:
        return await self._store.query(
            NOTES, [Filter("productionId", "==", production_id)], [Order("createdAt")]
        )
