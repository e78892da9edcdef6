# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: In-memory document store.
Default backend for local runs and tests. NO business rules here — pure CRUD.
"""

import copy
from typing import Any, Optional, Sequence

from booking.core.exceptions import NotFound
from booking.repositories.document_store import (
    DocumentStore, Filter, Order, matches, new_id, sort_documents,
)


class InMemoryDocumentStore(DocumentStore):
    """Collections of deep-copied documents keyed by id."""

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    # ── Read ──

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        ordering: Sequence[Order] = (),
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        documents = [
            copy.deepcopy(doc)
            for doc in self._collections.get(collection, {}).values()
            if matches(doc, filters)
        ]
        documents = sort_documents(documents, ordering)
        return documents[:limit] if limit is not None else documents

    async def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        doc = self._collections.get(collection, {}).get(doc_id)
        return copy.deepcopy(doc) if doc is not None else None

    # ── Write ──

    async def update(self, collection: str, doc_id: str, patch: dict[str, Any]) -> None:
        doc = self._collections.get(collection, {}).get(doc_id)
        if doc is None:
            raise NotFound(collection, doc_id)
        doc.update(copy.deepcopy(patch))

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc = copy.deepcopy(data)
        doc_id = doc.get("id") or new_id()
        doc["id"] = doc_id
        self._collections.setdefault(collection, {})[doc_id] = doc
        return doc_id

    async def delete(self, collection: str, doc_id: str) -> None:
        if self._collections.get(collection, {}).pop(doc_id, None) is None:
            raise NotFound(collection, doc_id)

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._collections.clear()
