# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Request / Response schemas — API contract definitions.
These are Pydantic models used ONLY at the controller (HTTP) boundary.
Payload keys are camelCase; snake_case is accepted too.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from booking.models.domain import AssignedStaff
from booking.services.interval import as_utc


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Production Schemas ──

class ProductionCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=500)
    production_date: Optional[date] = Field(default=None, alias="date")
    call_time: datetime
    start_time: datetime
    end_time: datetime
    venue: str = Field(..., description="Studio 1..Studio 4 or Location")
    location_details: Optional[str] = Field(default=None, max_length=1000)
    is_outside_broadcast: bool = False
    notes: Optional[str] = Field(default=None, max_length=5000)
    transport_details: Optional[str] = Field(default=None, max_length=1000)


class AssignmentRequest(CamelModel):
    """Full roster for a production. Omitted slots are cleared."""
    assigned_staff: AssignedStaff = Field(default_factory=AssignedStaff)


class OvertimeRequest(CamelModel):
    actual_end_time: datetime
    reason: Optional[str] = Field(default=None, max_length=2000)


class CompleteRequest(CamelModel):
    completion_notes: Optional[str] = Field(default=None, max_length=5000)


class CancelRequest(CamelModel):
    reason: Optional[str] = Field(default=None, max_length=2000)


class NoteCreateRequest(CamelModel):
    content: str = Field(..., min_length=1, max_length=5000)


# ── Availability Schemas ──

class AvailabilityRequest(CamelModel):
    staff_ids: list[str] = Field(..., min_length=1)
    start_time: datetime
    end_time: datetime
    exclude_production_id: Optional[str] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalise_timestamps(cls, v: datetime) -> datetime:
        return as_utc(v)


# ── Staff Schemas ──

class StaffCreateRequest(CamelModel):
    id: Optional[str] = Field(default=None, description="Identity-provider uid, generated if absent")
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    roles: list[str] = Field(..., min_length=1)
    department: Optional[str] = None
    phone_number: Optional[str] = None


class StaffUpdateRequest(CamelModel):
    """Partial update — only provided fields change."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, min_length=3, max_length=255)
    roles: Optional[list[str]] = Field(default=None, min_length=1)
    department: Optional[str] = None
    phone_number: Optional[str] = None


class StaffNamesRequest(CamelModel):
    staff_ids: list[str] = Field(default_factory=list)


# ── Issue Schemas ──

class IssueCreateRequest(CamelModel):
    production_id: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1, max_length=5000)
    priority: str = Field(default="medium", pattern="^(low|medium|high)$")


class IssueStatusRequest(CamelModel):
    status: str = Field(..., pattern="^(pending|in-progress|resolved)$")


class IssuePriorityRequest(CamelModel):
    priority: str = Field(..., pattern="^(low|medium|high)$")


# ── Announcement Schemas ──

class AnnouncementCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
    target_group: str = Field(default="all", pattern="^(all|producers|operators)$")
    is_pinned: bool = False


class AnnouncementUpdateRequest(CamelModel):
    """Partial update — only provided fields change."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    message: Optional[str] = Field(default=None, min_length=1, max_length=5000)
    target_group: Optional[str] = Field(default=None, pattern="^(all|producers|operators)$")
    is_pinned: Optional[bool] = None


class AnnouncementPinRequest(CamelModel):
    is_pinned: bool


# ── Responses ──

class ErrorResponse(BaseModel):
    error: str
    detail: Optional[str] = None


class PaginatedProductions(BaseModel):
    total: int
    page: int
    per_page: int
    productions: list[dict[str, Any]]
