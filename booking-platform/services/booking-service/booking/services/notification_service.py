# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Notification fan-out and per-recipient inbox.

Each recipient gets a persisted record first, then a best-effort push.
Store failures propagate; push failures never do.
"""

from typing import Iterable, Optional

from booking.core.logging import get_logger
from booking.metrics.prometheus import NOTIFICATIONS_SENT
from booking.models.domain import Notification
from booking.repositories.document_store import new_id
from booking.repositories.notification_repository import NotificationRepository
from booking.services.notification_client import NotificationClient

logger = get_logger(__name__)


class NotificationService:
    def __init__(
        self,
        notification_repo: NotificationRepository,
        notification_client: NotificationClient,
    ) -> None:
        self._notifications = notification_repo
        self._client = notification_client

    async def notify(
        self,
        recipient_ids: Iterable[str],
        notification_type: str,
        message: str,
        production_id: Optional[str] = None,
    ) -> list[Notification]:
        sent: list[Notification] = []
        for recipient_id in dict.fromkeys(r for r in recipient_ids if r):
            notification = Notification(
                id=new_id(),
                recipient_id=recipient_id,
                production_id=production_id,
                type=notification_type,
                message=message,
            )
            await self._notifications.add(notification)
            await self._client.push(recipient_id, notification_type, message, production_id)
            NOTIFICATIONS_SENT.labels(type=notification_type).inc()
            sent.append(notification)

        logger.info(
            "Notified %d recipient(s): type=%s, production=%s",
            len(sent), notification_type, production_id,
        )
        return sent

    # ── Inbox ──

    async def list_for_recipient(
        self, recipient_id: str, unread_only: bool = False, limit: Optional[int] = None
    ) -> list[Notification]:
        return await self._notifications.list_for_recipient(recipient_id, unread_only, limit)

    async def unread_count(self, recipient_id: str) -> int:
        return await self._notifications.count_unread(recipient_id)

    async def mark_read(self, notification_id: str) -> Notification:
        await self._notifications.mark_read(notification_id)
        return await self._notifications.get(notification_id)

    async def mark_all_read(self, recipient_id: str) -> int:
        unread = await self._notifications.list_for_recipient(recipient_id, unread_only=True)
        for notification in unread:
            await self._notifications.mark_read(notification.id)
        return len(unread)
