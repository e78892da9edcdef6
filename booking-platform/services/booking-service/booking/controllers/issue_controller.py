# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Issue reporting endpoints.
"""

from typing import Optional

from fastapi import APIRouter, Depends

from booking.core.dependencies import get_actor, get_issue_service
from booking.models.domain import Actor
from booking.schemas.booking import IssueCreateRequest, IssuePriorityRequest, IssueStatusRequest
from booking.services.issue_service import IssueService

router = APIRouter(prefix="/api/v1", tags=["Issues"])


@router.post("/issues", status_code=201)
async def report_issue(
    payload: IssueCreateRequest,
    actor: Actor = Depends(get_actor),
    service: IssueService = Depends(get_issue_service),
):
    issue = await service.report(actor, payload.production_id, payload.description, payload.priority)
    return issue.to_document()


@router.get("/issues")
async def list_issues(
    production_id: Optional[str] = None,
    reported_by: Optional[str] = None,
    status: Optional[str] = None,
    service: IssueService = Depends(get_issue_service),
):
    issues = await service.list_issues(production_id, reported_by, status)
    return [i.to_document() for i in issues]


@router.get("/issues/{issue_id}")
async def get_issue(
    issue_id: str,
    service: IssueService = Depends(get_issue_service),
):
    return (await service.get(issue_id)).to_document()


@router.patch("/issues/{issue_id}/status")
async def update_issue_status(
    issue_id: str,
    payload: IssueStatusRequest,
    service: IssueService = Depends(get_issue_service),
):
    return (await service.update_status(issue_id, payload.status)).to_document()


@router.patch("/issues/{issue_id}/priority")
async def update_issue_priority(
    issue_id: str,
    payload: IssuePriorityRequest,
    service: IssueService = Depends(get_issue_service),
):
    return (await service.update_priority(issue_id, payload.priority)).to_document()
