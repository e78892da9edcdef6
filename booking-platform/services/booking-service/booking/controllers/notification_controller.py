# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Per-recipient notification inbox.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from booking.core.dependencies import get_notification_service
from booking.services.notification_service import NotificationService

router = APIRouter(prefix="/api/v1", tags=["Notifications"])


@router.get("/notifications/{recipient_id}")
async def list_notifications(
    recipient_id: str,
    unread_only: bool = Query(default=False, alias="unreadOnly"),
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    service: NotificationService = Depends(get_notification_service),
):
    notifications = await service.list_for_recipient(recipient_id, unread_only, limit)
    return [n.to_document() for n in notifications]


@router.get("/notifications/{recipient_id}/unread-count")
async def unread_count(
    recipient_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    return {"recipientId": recipient_id, "unread": await service.unread_count(recipient_id)}


@router.post("/notifications/{recipient_id}/read-all")
async def mark_all_read(
    recipient_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    return {"recipientId": recipient_id, "marked": await service.mark_all_read(recipient_id)}


@router.post("/notifications/read/{notification_id}")
async def mark_read(
    notification_id: str,
    service: NotificationService = Depends(get_notification_service),
):
    return (await service.mark_read(notification_id)).to_document()
