# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Role-slot lookup table — the one place that maps a crew role tag to
the production field holding it.

Pure data + helpers, no I/O.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from pydantic.alias_generators import to_snake

from booking.models.domain import AssignedStaff


@dataclass(frozen=True)
class RoleSlot:
    role: str
    key: str
    label: str
    multiple: bool

    @property
    def field_path(self) -> str:
        """Dotted document path used in store filters."""
        return f"assignedStaff.{self.key}"

    @property
    def attribute(self) -> str:
        """Attribute name on AssignedStaff."""
        return to_snake(self.key)


ROLE_SLOTS: dict[str, RoleSlot] = {
    slot.role: slot
    for slot in (
        RoleSlot("camera_operator", "cameraOperators", "Camera Operator", True),
        RoleSlot("sound_operator", "soundOperators", "Sound Operator", True),
        RoleSlot("lighting_operator", "lightingOperators", "Lighting Operator", True),
        RoleSlot("evs_operator", "evsOperator", "EVS Operator", False),
        RoleSlot("director", "director", "Director", False),
        RoleSlot("stream_operator", "streamOperator", "Stream Operator", False),
        RoleSlot("technician", "technician", "Technician", False),
        RoleSlot("electrician", "electrician", "Electrician", False),
    )
}

SLOTS_BY_KEY: dict[str, RoleSlot] = {slot.key: slot for slot in ROLE_SLOTS.values()}
ARRAY_SLOT_KEYS = tuple(s.key for s in ROLE_SLOTS.values() if s.multiple)
SCALAR_SLOT_KEYS = tuple(s.key for s in ROLE_SLOTS.values() if not s.multiple)

# Non-crew roles reference a production through its own id fields
OWNER_FIELDS: dict[str, str] = {
    "producer": "requestedById",
    "booking_officer": "processedById",
}


def slot_for_role(role: str) -> Optional[RoleSlot]:
    return ROLE_SLOTS.get(role)


def field_for_role(role: str) -> str:
    """Document field that references a staff member holding ``role``."""
    slot = ROLE_SLOTS.get(role)
    if slot is not None:
        return slot.field_path
    if role in OWNER_FIELDS:
        return OWNER_FIELDS[role]
    raise KeyError(f"Unknown role '{role}'")


def iter_assignments(assigned: AssignedStaff) -> Iterator[tuple[RoleSlot, str]]:
    """Yield (slot, staff_id) for every filled slot, array slots first."""
    for slot in ROLE_SLOTS.values():
        value = getattr(assigned, slot.attribute)
        if slot.multiple:
            for staff_id in value:
                yield slot, staff_id
        elif value:
            yield slot, value


def assigned_staff_ids(assigned: AssignedStaff) -> list[str]:
    """Every distinct staff id on the roster, in slot order."""
    return list(dict.fromkeys(staff_id for _, staff_id in iter_assignments(assigned)))


def slots_held_by(assigned: AssignedStaff, staff_id: str) -> list[str]:
    return [slot.key for slot, held in iter_assignments(assigned) if held == staff_id]
