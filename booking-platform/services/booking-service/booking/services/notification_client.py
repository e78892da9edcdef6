# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Notification client — inter-service communication.
Handles HTTP calls to the notification-service with timeout & fault tolerance.
"""

from typing import Optional

import httpx

from booking.core.config import settings
from booking.core.logging import get_logger
from booking.metrics.prometheus import PUSH_FAILURES

logger = get_logger(__name__)


class NotificationClient:
    """Fire-and-forget push sender via notification-service."""

    async def push(
        self,
        recipient_id: str,
        notification_type: str,
        message: str,
        production_id: Optional[str] = None,
    ) -> bool:
        """Push one notification. Failures are logged but never raised."""
        try:
            async with httpx.AsyncClient(timeout=settings.NOTIFICATION_TIMEOUT) as client:
                resp = await client.post(
                    f"{settings.NOTIFICATION_SERVICE_URL}/api/v1/notify",
                    json={
                        "channel": "push",
                        "recipient": recipient_id,
                        "message": message,
                        "type": notification_type,
                        "production_id": production_id or "N/A",
                    },
                )
            logger.info(
                "Push sent: recipient=%s, type=%s, status=%d",
                recipient_id,
                notification_type,
                resp.status_code,
            )
            return resp.status_code < 400
        except Exception as exc:
            PUSH_FAILURES.inc()
            logger.warning("Push failed: recipient=%s, error=%s", recipient_id, exc)
            return False
