# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Issue data access. Issues are never deleted.
"""

from typing import Any, Optional

from booking.core.exceptions import NotFound
from booking.models.domain import Issue
from booking.repositories.document_store import DocumentStore, Filter, Order

COLLECTION = "issues"
NEWEST_FIRST = (Order("createdAt", descending=True),)


class IssueRepository:
    def __init__(self, store: DocumentStore):
        self._store = store

    async def get(self, issue_id: str) -> Issue:
        doc = await self._store.get(COLLECTION, issue_id)
        if doc is None:
            raise NotFound(COLLECTION, issue_id)
        return Issue.from_document(doc)

    async def find(
        self,
        production_id: Optional[str] = None,
        reported_by_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Issue]:
        filters: list[Filter] = []
        if production_id:
            filters.append(Filter("productionId", "==", production_id))
        if reported_by_id:
            filters.append(Filter("reportedById", "==", reported_by_id))
        if status:
            filters.append(Filter("status", "==", status))
        docs = await self._store.query(COLLECTION, filters, NEWEST_FIRST)
        return [Issue.from_document(d) for d in docs]

    async def add(self, issue: Issue) -> Issue:
        await self._store.add(COLLECTION, issue.to_document())
        return issue

    async def update(self, issue_id: str, patch: dict[str, Any]) -> Issue:
        await self._store.update(COLLECTION, issue_id, patch)
        return await self.get(issue_id)
