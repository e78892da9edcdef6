# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Issue reporting for productions.
"""

from typing import Optional

from booking.core.logging import get_logger
from booking.metrics.prometheus import ISSUES_REPORTED
from booking.models.domain import ISSUE_PRIORITIES, ISSUE_STATUSES, Actor, Issue, utcnow
from booking.repositories.document_store import new_id
from booking.repositories.history_repository import HistoryRepository
from booking.repositories.issue_repository import IssueRepository
from booking.repositories.production_repository import ProductionRepository
from booking.services.notification_service import NotificationService

logger = get_logger(__name__)


class IssueService:
    def __init__(
        self,
        issue_repo: IssueRepository,
        production_repo: ProductionRepository,
        history_repo: HistoryRepository,
        notifications: NotificationService,
    ) -> None:
        self._issues = issue_repo
        self._productions = production_repo
        self._history = history_repo
        self._notifications = notifications

    async def report(
        self,
        actor: Actor,
        production_id: str,
        description: str,
        priority: str = "medium",
    ) -> Issue:
        production = await self._productions.get(production_id)
        issue = Issue(
            id=new_id(),
            reported_by_id=actor.id,
            production_id=production.id,
            description=description,
            priority=priority,
        )
        await self._issues.add(issue)
        ISSUES_REPORTED.labels(priority=issue.priority).inc()
        await self._history.record_event(
            production.id, "issue_reported", actor.id,
            {"issue_id": issue.id, "priority": issue.priority},
        )
        logger.info(
            "Issue reported: id=%s, production=%s, priority=%s",
            issue.id, production.id, issue.priority,
        )

        recipients = [production.requested_by_id, production.processed_by_id]
        await self._notifications.notify(
            [r for r in recipients if r and r != actor.id],
            "issue",
            f"New {issue.priority} priority issue on '{production.name}'",
            production_id=production.id,
        )
        return issue

    async def get(self, issue_id: str) -> Issue:
        return await self._issues.get(issue_id)

    async def list_issues(
        self,
        production_id: Optional[str] = None,
        reported_by_id: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[Issue]:
        return await self._issues.find(production_id, reported_by_id, status)

    async def update_status(self, issue_id: str, status: str) -> Issue:
        if status not in ISSUE_STATUSES:
            raise ValueError(f"status must be one of {ISSUE_STATUSES}")
        await self._issues.get(issue_id)
        patch = {
            "status": status,
            "resolvedAt": utcnow().isoformat() if status == "resolved" else None,
        }
        issue = await self._issues.update(issue_id, patch)
        logger.info("Issue status: id=%s, status=%s", issue_id, status)
        return issue

    async def update_priority(self, issue_id: str, priority: str) -> Issue:
        if priority not in ISSUE_PRIORITIES:
            raise ValueError(f"priority must be one of {ISSUE_PRIORITIES}")
        await self._issues.get(issue_id)
        return await self._issues.update(issue_id, {"priority": priority})
