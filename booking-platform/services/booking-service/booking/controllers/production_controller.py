# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Production endpoints — request, assign, lifecycle, notes, timeline.
Thin HTTP layer — delegates ALL logic to the production services.
Domain errors are rendered by the exception handlers registered in main.py.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from booking.core.dependencies import (
    get_actor,
    get_assignment_coordinator,
    get_production_service,
)
from booking.models.domain import Actor
from booking.schemas.booking import (
    AssignmentRequest,
    CancelRequest,
    CompleteRequest,
    NoteCreateRequest,
    OvertimeRequest,
    ProductionCreateRequest,
)
from booking.services.assignment import StaffAssignmentCoordinator
from booking.services.production_service import ProductionService

router = APIRouter(prefix="/api/v1", tags=["Productions"])


def _conflict_map(conflicts) -> dict:
    return {
        staff_id: [p.to_document() for p in productions]
        for staff_id, productions in conflicts.items()
    }


@router.post("/productions", status_code=201)
async def create_production(
    payload: ProductionCreateRequest,
    actor: Actor = Depends(get_actor),
    service: ProductionService = Depends(get_production_service),
):
    """Request a new production (producers and booking officers)."""
    try:
        production = await service.create_production(
            actor, payload.model_dump(exclude_none=True)
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return production.to_document()


@router.get("/productions")
async def list_productions(
    status: Optional[str] = Query(default=None, pattern="^(requested|confirmed|completed|cancelled|overtime)$"),
    date_from: Optional[date] = Query(default=None, alias="dateFrom"),
    date_to: Optional[date] = Query(default=None, alias="dateTo"),
    requested_by: Optional[str] = Query(default=None, alias="requestedBy"),
    page: int = Query(default=1, ge=1),
    per_page: Optional[int] = Query(default=None, ge=1, alias="perPage"),
    service: ProductionService = Depends(get_production_service),
):
    """List productions in chronological order with filters and pagination."""
    result = await service.list_productions(
        status=status,
        date_from=date_from,
        date_to=date_to,
        requested_by_id=requested_by,
        page=page,
        per_page=per_page,
    )
    return {
        "total": result["total"],
        "page": result["page"],
        "perPage": result["per_page"],
        "productions": [p.to_document() for p in result["productions"]],
    }


@router.get("/productions/summary")
async def production_summary(
    service: ProductionService = Depends(get_production_service),
):
    """Production counts per status."""
    summary = await service.summary()
    return {"total": summary["total"], "byStatus": summary["by_status"]}


@router.get("/productions/{production_id}")
async def get_production(
    production_id: str,
    service: ProductionService = Depends(get_production_service),
):
    production = await service.get_production(production_id)
    return production.to_document()


@router.post("/productions/{production_id}/assignment/review")
async def review_assignment(
    production_id: str,
    payload: AssignmentRequest,
    coordinator: StaffAssignmentCoordinator = Depends(get_assignment_coordinator),
):
    """Check a proposed roster for conflicts without committing it."""
    conflicts = await coordinator.review_assignment(production_id, payload.assigned_staff)
    return {"hasConflicts": bool(conflicts), "conflicts": _conflict_map(conflicts)}


@router.put("/productions/{production_id}/assignment")
async def assign_staff(
    production_id: str,
    payload: AssignmentRequest,
    actor: Actor = Depends(get_actor),
    coordinator: StaffAssignmentCoordinator = Depends(get_assignment_coordinator),
):
    """Commit the full roster and confirm the production. Conflicts are advisory."""
    result = await coordinator.assign_staff(production_id, payload.assigned_staff, actor)
    return {
        "production": result.production.to_document(),
        "hasConflicts": result.has_conflicts,
        "conflicts": _conflict_map(result.conflicts),
    }


@router.post("/productions/{production_id}/overtime")
async def report_overtime(
    production_id: str,
    payload: OvertimeRequest,
    actor: Actor = Depends(get_actor),
    service: ProductionService = Depends(get_production_service),
):
    production = await service.report_overtime(
        production_id, actor, payload.actual_end_time, payload.reason
    )
    return production.to_document()


@router.post("/productions/{production_id}/complete")
async def complete_production(
    production_id: str,
    payload: Optional[CompleteRequest] = None,
    actor: Actor = Depends(get_actor),
    service: ProductionService = Depends(get_production_service),
):
    notes = payload.completion_notes if payload else None
    production = await service.complete_production(production_id, actor, notes)
    return production.to_document()


@router.post("/productions/{production_id}/cancel")
async def cancel_production(
    production_id: str,
    payload: Optional[CancelRequest] = None,
    actor: Actor = Depends(get_actor),
    service: ProductionService = Depends(get_production_service),
):
    reason = payload.reason if payload else None
    production = await service.cancel_production(production_id, actor, reason)
    return production.to_document()


@router.post("/productions/{production_id}/notes", status_code=201)
async def add_note(
    production_id: str,
    payload: NoteCreateRequest,
    actor: Actor = Depends(get_actor),
    service: ProductionService = Depends(get_production_service),
):
    """Append a note. Accepted in every status, including terminal ones."""
    return await service.add_note(production_id, actor, payload.content)


@router.get("/productions/{production_id}/notes")
async def list_notes(
    production_id: str,
    service: ProductionService = Depends(get_production_service),
):
    return await service.get_notes(production_id)


@router.get("/productions/{production_id}/timeline")
async def get_timeline(
    production_id: str,
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    service: ProductionService = Depends(get_production_service),
):
    return await service.get_timeline(production_id, limit)
