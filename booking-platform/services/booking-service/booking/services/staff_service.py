# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Staff directory — registration, profile edits, lookups.
Staff records are never deleted.
"""

from typing import Any, Iterable, Optional

from booking.core.logging import get_logger
from booking.models.domain import StaffMember, utcnow
from booking.repositories.document_store import new_id
from booking.repositories.staff_repository import StaffRepository

logger = get_logger(__name__)

PROFILE_FIELDS = ("name", "email", "roles", "department", "phone_number")


class StaffService:
    def __init__(self, staff_repo: StaffRepository) -> None:
        self._staff = staff_repo

    async def register(self, details: dict[str, Any], staff_id: Optional[str] = None) -> StaffMember:
        """Create a staff record. Emails are unique across the directory."""
        email = details["email"].strip().lower()
        if await self._staff.find_by_email(email) is not None:
            raise ValueError(f"A staff member with email '{email}' already exists")

        member = StaffMember(id=staff_id or new_id(), **{**details, "email": email})
        member.profile_complete = _is_complete(member)
        await self._staff.add(member)
        logger.info("Staff registered: id=%s, roles=%s", member.id, member.roles)
        return member

    async def get(self, staff_id: str) -> StaffMember:
        return await self._staff.get(staff_id)

    async def list_staff(self, role: Optional[str] = None) -> list[StaffMember]:
        return await self._staff.find(role)

    async def update(self, staff_id: str, changes: dict[str, Any]) -> StaffMember:
        current = await self._staff.get(staff_id)
        if "email" in changes:
            email = changes["email"].strip().lower()
            holder = await self._staff.find_by_email(email)
            if holder is not None and holder.id != staff_id:
                raise ValueError(f"A staff member with email '{email}' already exists")
            changes = {**changes, "email": email}
        merged = current.model_copy(update=changes)
        # re-validate the edited profile before writing it
        candidate = StaffMember.model_validate(merged.model_dump())
        candidate.profile_complete = _is_complete(candidate)
        candidate.updated_at = utcnow()

        patch = {
            k: v for k, v in candidate.to_document().items()
            if k in ("name", "email", "roles", "department", "phoneNumber",
                     "profileComplete", "updatedAt")
        }
        updated = await self._staff.update(staff_id, patch)
        logger.info("Staff updated: id=%s, fields=%s", staff_id, sorted(changes))
        return updated

    async def names(self, staff_ids: Iterable[str]) -> dict[str, str]:
        """id -> display name; unknown ids are left out."""
        found: dict[str, str] = {}
        for staff_id in dict.fromkeys(staff_ids):
            if await self._staff.exists(staff_id):
                found[staff_id] = (await self._staff.get(staff_id)).name
        return found


def _is_complete(member: StaffMember) -> bool:
    return all(getattr(member, f) for f in PROFILE_FIELDS)
