# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Staff availability checks.
"""

from fastapi import APIRouter, Depends, HTTPException

from booking.core.dependencies import get_availability_checker
from booking.schemas.booking import AvailabilityRequest
from booking.services.availability import AvailabilityChecker
from booking.services.interval import TimeInterval

router = APIRouter(prefix="/api/v1", tags=["Availability"])


@router.post("/availability/check")
async def check_availability(
    payload: AvailabilityRequest,
    checker: AvailabilityChecker = Depends(get_availability_checker),
):
    """Check one or more staff members against a candidate production interval."""
    if payload.start_time >= payload.end_time:
        raise HTTPException(status_code=400, detail="startTime must be before endTime")
    results = await checker.check_many(
        payload.staff_ids,
        TimeInterval(payload.start_time, payload.end_time),
        exclude_production_id=payload.exclude_production_id,
    )
    return {"results": [r.to_document() for r in results.values()]}
