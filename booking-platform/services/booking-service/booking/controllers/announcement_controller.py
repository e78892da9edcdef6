# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Announcement board endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response

from booking.core.dependencies import get_actor, get_announcement_service
from booking.models.domain import Actor
from booking.schemas.booking import (
    AnnouncementCreateRequest, AnnouncementPinRequest, AnnouncementUpdateRequest,
)
from booking.services.announcement_service import AnnouncementService

router = APIRouter(prefix="/api/v1", tags=["Announcements"])


@router.post("/announcements", status_code=201)
async def post_announcement(
    payload: AnnouncementCreateRequest,
    actor: Actor = Depends(get_actor),
    service: AnnouncementService = Depends(get_announcement_service),
):
    announcement = await service.create(
        actor, payload.title, payload.message, payload.target_group, payload.is_pinned
    )
    return announcement.to_document()


@router.get("/announcements")
async def list_announcements(
    target: Optional[str] = Query(default=None, pattern="^(all|producers|operators)$"),
    service: AnnouncementService = Depends(get_announcement_service),
):
    return [a.to_document() for a in await service.list_announcements(target)]


@router.get("/announcements/{announcement_id}")
async def get_announcement(
    announcement_id: str,
    service: AnnouncementService = Depends(get_announcement_service),
):
    return (await service.get(announcement_id)).to_document()


@router.patch("/announcements/{announcement_id}")
async def update_announcement(
    announcement_id: str,
    payload: AnnouncementUpdateRequest,
    actor: Actor = Depends(get_actor),
    service: AnnouncementService = Depends(get_announcement_service),
):
    changes = payload.model_dump(exclude_none=True)
    return (await service.update(announcement_id, actor, changes)).to_document()


@router.post("/announcements/{announcement_id}/pin")
async def pin_announcement(
    announcement_id: str,
    payload: AnnouncementPinRequest,
    actor: Actor = Depends(get_actor),
    service: AnnouncementService = Depends(get_announcement_service),
):
    return (await service.toggle_pin(announcement_id, actor, payload.is_pinned)).to_document()


@router.delete("/announcements/{announcement_id}", status_code=204)
async def delete_announcement(
    announcement_id: str,
    actor: Actor = Depends(get_actor),
    service: AnnouncementService = Depends(get_announcement_service),
):
    await service.delete(announcement_id, actor)
    return Response(status_code=204)
