# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Staff directory and personal schedules.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from booking.core.dependencies import get_production_service, get_staff_service
from booking.schemas.booking import StaffCreateRequest, StaffNamesRequest, StaffUpdateRequest
from booking.services.production_service import ProductionService
from booking.services.staff_service import StaffService

router = APIRouter(prefix="/api/v1", tags=["Staff"])


@router.post("/staff", status_code=201)
async def register_staff(
    payload: StaffCreateRequest,
    service: StaffService = Depends(get_staff_service),
):
    details = payload.model_dump(exclude_none=True, exclude={"id"})
    try:
        member = await service.register(details, staff_id=payload.id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return member.to_document()


@router.get("/staff")
async def list_staff(
    role: Optional[str] = None,
    service: StaffService = Depends(get_staff_service),
):
    return [m.to_document() for m in await service.list_staff(role)]


@router.post("/staff/names")
async def staff_names(
    payload: StaffNamesRequest,
    service: StaffService = Depends(get_staff_service),
):
    """Resolve staff ids to display names; unknown ids are omitted."""
    return await service.names(payload.staff_ids)


@router.get("/staff/{staff_id}")
async def get_staff(
    staff_id: str,
    service: StaffService = Depends(get_staff_service),
):
    return (await service.get(staff_id)).to_document()


@router.patch("/staff/{staff_id}")
async def update_staff(
    staff_id: str,
    payload: StaffUpdateRequest,
    service: StaffService = Depends(get_staff_service),
):
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")
    try:
        member = await service.update(staff_id, changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return member.to_document()


@router.get("/staff/{staff_id}/schedule")
async def staff_schedule(
    staff_id: str,
    date_from: Optional[date] = Query(default=None, alias="dateFrom"),
    date_to: Optional[date] = Query(default=None, alias="dateTo"),
    include_cancelled: bool = Query(default=False, alias="includeCancelled"),
    service: ProductionService = Depends(get_production_service),
):
    """Productions the staff member is rostered on, by start time."""
    productions = await service.staff_schedule(
        staff_id, date_from=date_from, date_to=date_to, include_cancelled=include_cancelled
    )
    return [p.to_document() for p in productions]
