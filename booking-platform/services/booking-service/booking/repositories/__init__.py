# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package — re-exports the store backends and typed repositories."""
from booking.repositories.announcement_repository import AnnouncementRepository
from booking.repositories.document_store import DocumentStore, Filter, Order
from booking.repositories.history_repository import HistoryRepository
from booking.repositories.issue_repository import IssueRepository
from booking.repositories.memory_store import InMemoryDocumentStore
from booking.repositories.notification_repository import NotificationRepository
from booking.repositories.production_repository import ProductionRepository
from booking.repositories.sql_store import SqlDocumentStore
from booking.repositories.staff_repository import StaffRepository

__all__ = [
    "DocumentStore", "Filter", "Order",
    "InMemoryDocumentStore", "SqlDocumentStore",
    "AnnouncementRepository", "HistoryRepository", "IssueRepository", "NotificationRepository",
    "ProductionRepository", "StaffRepository",
]
