# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Announcement board — booking officers post notices to every staff
member, to producers only or to operators only.

Reading the board is open to everyone; posting, editing, pinning and
removing are booking-officer actions.
"""

from typing import Any, Optional

from booking.core.exceptions import Forbidden
from booking.core.logging import get_logger
from booking.metrics.prometheus import ANNOUNCEMENTS_PUBLISHED
from booking.models.domain import ANNOUNCEMENT_TARGETS, Actor, Announcement, utcnow
from booking.repositories.announcement_repository import AnnouncementRepository
from booking.repositories.document_store import new_id

logger = get_logger(__name__)

EDITABLE_FIELDS = ("title", "message", "target_group", "is_pinned")


class AnnouncementService:
    def __init__(self, announcement_repo: AnnouncementRepository) -> None:
        self._announcements = announcement_repo

    async def create(
        self,
        actor: Actor,
        title: str,
        message: str,
        target_group: str = "all",
        is_pinned: bool = False,
    ) -> Announcement:
        _ensure_officer(actor, "post announcements")
        announcement = Announcement(
            id=new_id(),
            title=title,
            message=message,
            target_group=target_group,
            created_by_id=actor.id,
            is_pinned=is_pinned,
        )
        await self._announcements.add(announcement)
        ANNOUNCEMENTS_PUBLISHED.labels(target_group=announcement.target_group).inc()
        logger.info(
            "Announcement posted: id=%s, target=%s, pinned=%s",
            announcement.id, announcement.target_group, announcement.is_pinned,
            extra={"announcement_id": announcement.id, "actor_id": actor.id},
        )
        return announcement

    async def get(self, announcement_id: str) -> Announcement:
        return await self._announcements.get(announcement_id)

    async def list_announcements(self, target: Optional[str] = None) -> list[Announcement]:
        """The whole board, or what ``target`` sees: its own posts plus ``all``."""
        if target is None:
            return await self._announcements.find()
        if target not in ANNOUNCEMENT_TARGETS:
            raise ValueError(f"target must be one of {ANNOUNCEMENT_TARGETS}")
        return await self._announcements.find(list(dict.fromkeys([target, "all"])))

    async def update(self, announcement_id: str, actor: Actor, changes: dict[str, Any]) -> Announcement:
        _ensure_officer(actor, "edit announcements")
        current = await self._announcements.get(announcement_id)
        changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS and v is not None}
        candidate = Announcement.model_validate(
            {**current.model_dump(), **changes, "updated_at": utcnow()}
        )
        document = candidate.to_document()
        patch = {
            k: document[k] for k in ("title", "message", "targetGroup", "isPinned", "updatedAt")
        }
        updated = await self._announcements.update(announcement_id, patch)
        logger.info(
            "Announcement updated: id=%s, fields=%s", announcement_id, sorted(changes),
            extra={"announcement_id": announcement_id, "actor_id": actor.id},
        )
        return updated

    async def toggle_pin(self, announcement_id: str, actor: Actor, is_pinned: bool) -> Announcement:
        _ensure_officer(actor, "pin announcements")
        await self._announcements.get(announcement_id)
        updated = await self._announcements.update(
            announcement_id, {"isPinned": is_pinned, "updatedAt": utcnow().isoformat()}
        )
        logger.info(
            "Announcement %s: id=%s", "pinned" if is_pinned else "unpinned", announcement_id,
            extra={"announcement_id": announcement_id, "actor_id": actor.id},
        )
        return updated

    async def delete(self, announcement_id: str, actor: Actor) -> None:
        _ensure_officer(actor, "remove announcements")
        await self._announcements.delete(announcement_id)
        logger.info(
            "Announcement removed: id=%s", announcement_id,
            extra={"announcement_id": announcement_id, "actor_id": actor.id},
        )


def _ensure_officer(actor: Actor, action: str) -> None:
    if not actor.is_booking_officer:
        raise Forbidden(actor.id, actor.capability, action)
