# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.

Attributes are snake_case in Python; documents and API payloads use the
camelCase keys the booking clients already speak (cameraOperators,
requestedById, ...).
"""

from datetime import date, datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from booking.services.interval import TimeInterval, as_utc

PRODUCTION_STATUSES = ("requested", "confirmed", "completed", "cancelled", "overtime")
VENUES = ("Studio 1", "Studio 2", "Studio 3", "Studio 4", "Location")
ISSUE_STATUSES = ("pending", "in-progress", "resolved")
ISSUE_PRIORITIES = ("low", "medium", "high")
NOTIFICATION_TYPES = (
    "assignment", "confirmation", "reminder", "issue",
    "overtime", "cancellation", "completion",
)
CAPABILITIES = ("producer", "booking_officer", "crew")
ANNOUNCEMENT_TARGETS = ("all", "producers", "operators")
STAFF_ROLES = (
    "producer", "booking_officer",
    "camera_operator", "sound_operator", "lighting_operator", "evs_operator",
    "director", "stream_operator", "technician", "electrician",
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DocumentModel(BaseModel):
    """Base for everything persisted in the document store."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_document(cls, document: dict[str, Any]):
        return cls.model_validate(document)


class Actor(BaseModel):
    """The authenticated caller, supplied explicitly by the identity layer."""

    id: str = Field(..., min_length=1)
    capability: str = Field(..., pattern="^(producer|booking_officer|crew)$")

    @property
    def is_booking_officer(self) -> bool:
        return self.capability == "booking_officer"


class AssignedStaff(DocumentModel):
    """Role-slot → staff id(s). Array slots behave as ordered sets."""

    camera_operators: list[str] = Field(default_factory=list)
    sound_operators: list[str] = Field(default_factory=list)
    lighting_operators: list[str] = Field(default_factory=list)
    evs_operator: Optional[str] = None
    director: Optional[str] = None
    stream_operator: Optional[str] = None
    technician: Optional[str] = None
    electrician: Optional[str] = None

    @field_validator("camera_operators", "sound_operators", "lighting_operators", mode="before")
    @classmethod
    def dedupe_ids(cls, v: Any) -> list[str]:
        if v is None:
            return []
        seen: list[str] = []
        for staff_id in v:
            if staff_id and staff_id not in seen:
                seen.append(staff_id)
        return seen

    @field_validator(
        "evs_operator", "director", "stream_operator", "technician", "electrician",
        mode="before",
    )
    @classmethod
    def blank_to_none(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class StaffMember(DocumentModel):
    id: str
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    roles: list[str] = Field(..., min_length=1)
    department: Optional[str] = None
    phone_number: Optional[str] = None
    profile_complete: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    @field_validator("roles")
    @classmethod
    def validate_roles(cls, v: list[str]) -> list[str]:
        unknown = [r for r in v if r not in STAFF_ROLES]
        if unknown:
            raise ValueError(f"unknown role(s) {unknown}; valid roles are {STAFF_ROLES}")
        return list(dict.fromkeys(v))

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalise_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class Production(DocumentModel):
    id: str
    name: str = Field(..., min_length=1, max_length=500)
    production_date: Optional[date] = Field(default=None, alias="date")
    call_time: datetime
    start_time: datetime
    end_time: datetime
    actual_end_time: Optional[datetime] = None
    venue: str
    location_details: Optional[str] = None
    is_outside_broadcast: bool = False
    status: str = "requested"
    assigned_staff: AssignedStaff = Field(default_factory=AssignedStaff)
    requested_by_id: str
    processed_by_id: Optional[str] = None
    overtime_reported: bool = False
    overtime_reason: Optional[str] = None
    notes: Optional[str] = None
    transport_details: Optional[str] = None
    completion_notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    @field_validator("call_time", "start_time", "end_time", "actual_end_time",
                     "created_at", "updated_at")
    @classmethod
    def normalise_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in PRODUCTION_STATUSES:
            raise ValueError(f"status must be one of {PRODUCTION_STATUSES}")
        return v

    @field_validator("venue")
    @classmethod
    def validate_venue(cls, v: str) -> str:
        if v not in VENUES:
            raise ValueError(f"venue must be one of {VENUES}")
        return v

    @model_validator(mode="after")
    def check_invariants(self) -> "Production":
        if self.start_time >= self.end_time:
            raise ValueError("startTime must be before endTime")
        if self.actual_end_time is not None and self.actual_end_time <= self.end_time:
            raise ValueError("actualEndTime must be after endTime")
        if self.is_outside_broadcast and not (self.location_details or "").strip():
            raise ValueError("locationDetails is required for outside broadcasts")
        if self.production_date is None:
            self.production_date = self.start_time.date()
        elif self.production_date != self.start_time.date():
            raise ValueError(
                f"date {self.production_date} does not match the startTime date "
                f"{self.start_time.date()} (UTC)"
            )
        return self

    @property
    def interval(self) -> TimeInterval:
        return TimeInterval(self.start_time, self.end_time)


class Issue(DocumentModel):
    id: str
    reported_by_id: str
    production_id: str
    description: str = Field(..., min_length=1, max_length=5000)
    priority: str = "medium"
    status: str = "pending"
    created_at: datetime = Field(default_factory=utcnow)
    resolved_at: Optional[datetime] = None

    @field_validator("priority")
    @classmethod
    def validate_priority(cls, v: str) -> str:
        if v not in ISSUE_PRIORITIES:
            raise ValueError(f"priority must be one of {ISSUE_PRIORITIES}")
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in ISSUE_STATUSES:
            raise ValueError(f"status must be one of {ISSUE_STATUSES}")
        return v

    @field_validator("created_at", "resolved_at")
    @classmethod
    def normalise_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class Notification(DocumentModel):
    id: str
    recipient_id: str
    production_id: Optional[str] = None
    type: str
    message: str
    read: bool = False
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        if v not in NOTIFICATION_TYPES:
            raise ValueError(f"type must be one of {NOTIFICATION_TYPES}")
        return v

    @field_validator("created_at")
    @classmethod
    def normalise_timestamps(cls, v: datetime) -> datetime:
        return as_utc(v)


class Announcement(DocumentModel):
    id: str
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)
    target_group: str = "all"
    created_by_id: str
    is_pinned: bool = False
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None

    @field_validator("target_group")
    @classmethod
    def validate_target_group(cls, v: str) -> str:
        if v not in ANNOUNCEMENT_TARGETS:
            raise ValueError(f"targetGroup must be one of {ANNOUNCEMENT_TARGETS}")
        return v

    @field_validator("created_at", "updated_at")
    @classmethod
    def normalise_timestamps(cls, v: Optional[datetime]) -> Optional[datetime]:
        return as_utc(v)


class AvailabilityResult(DocumentModel):
    """Transient answer to an availability query. Never persisted."""

    staff_id: str
    available: bool
    conflicts: list[Production] = Field(default_factory=list)
