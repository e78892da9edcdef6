# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection — wire the document store, repositories and services.
"""

from typing import Optional

from fastapi import Header, HTTPException
from pydantic import ValidationError
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from booking.core.config import settings
from booking.models.domain import Actor
from booking.repositories.announcement_repository import AnnouncementRepository
from booking.repositories.document_store import DocumentStore
from booking.repositories.history_repository import HistoryRepository
from booking.repositories.issue_repository import IssueRepository
from booking.repositories.memory_store import InMemoryDocumentStore
from booking.repositories.notification_repository import NotificationRepository
from booking.repositories.production_repository import ProductionRepository
from booking.repositories.sql_store import SqlDocumentStore
from booking.repositories.staff_repository import StaffRepository
from booking.services.announcement_service import AnnouncementService
from booking.services.assignment import StaffAssignmentCoordinator
from booking.services.availability import AvailabilityChecker
from booking.services.issue_service import IssueService
from booking.services.notification_client import NotificationClient
from booking.services.notification_service import NotificationService
from booking.services.production_service import ProductionService
from booking.services.staff_service import StaffService


def build_engine(url: str = settings.DATABASE_URL) -> Engine:
    if url.startswith("sqlite"):
        # one shared connection so in-memory sqlite survives across threads
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=settings.POOL_SIZE,
        max_overflow=settings.MAX_OVERFLOW,
        pool_recycle=settings.POOL_RECYCLE,
    )


def build_store() -> DocumentStore:
    if settings.DOCUMENT_STORE == "sql":
        return SqlDocumentStore(build_engine())
    return InMemoryDocumentStore()


# ── Singleton store + repository instances ──
_store = build_store()
_production_repo = ProductionRepository(_store)
_staff_repo = StaffRepository(_store)
_issue_repo = IssueRepository(_store)
_notification_repo = NotificationRepository(_store)
_history_repo = HistoryRepository(_store)
_announcement_repo = AnnouncementRepository(_store)
_notification_client = NotificationClient()

# ── Service instances (with injected dependencies) ──
_notification_service = NotificationService(
    notification_repo=_notification_repo,
    notification_client=_notification_client,
)
_availability_checker = AvailabilityChecker(
    production_repo=_production_repo,
    staff_repo=_staff_repo,
)
_assignment_coordinator = StaffAssignmentCoordinator(
    production_repo=_production_repo,
    history_repo=_history_repo,
    availability=_availability_checker,
    notifications=_notification_service,
)
_production_service = ProductionService(
    production_repo=_production_repo,
    staff_repo=_staff_repo,
    history_repo=_history_repo,
    notifications=_notification_service,
)
_staff_service = StaffService(staff_repo=_staff_repo)
_issue_service = IssueService(
    issue_repo=_issue_repo,
    production_repo=_production_repo,
    history_repo=_history_repo,
    notifications=_notification_service,
)
_announcement_service = AnnouncementService(announcement_repo=_announcement_repo)


# ── FastAPI dependency functions ──
def get_store() -> DocumentStore:
    return _store


def get_production_repo() -> ProductionRepository:
    return _production_repo


def get_notification_client() -> NotificationClient:
    return _notification_client


def get_production_service() -> ProductionService:
    return _production_service


def get_assignment_coordinator() -> StaffAssignmentCoordinator:
    return _assignment_coordinator


def get_availability_checker() -> AvailabilityChecker:
    return _availability_checker


def get_staff_service() -> StaffService:
    return _staff_service


def get_issue_service() -> IssueService:
    return _issue_service


def get_notification_service() -> NotificationService:
    return _notification_service


def get_announcement_service() -> AnnouncementService:
    return _announcement_service


def get_actor(
    x_actor_id: Optional[str] = Header(default=None),
    x_actor_role: Optional[str] = Header(default=None),
) -> Actor:
    """Caller identity, forwarded by the gateway after authentication."""
    if not x_actor_id or not x_actor_role:
        raise HTTPException(status_code=401, detail="X-Actor-Id and X-Actor-Role headers are required")
    try:
        return Actor(id=x_actor_id, capability=x_actor_role)
    except ValidationError:
        raise HTTPException(status_code=401, detail=f"Unknown actor role '{x_actor_role}'")
