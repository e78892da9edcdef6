# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Error taxonomy for the booking core.
Every error carries a machine-readable kind plus the offending ids, so the
HTTP layer (or any other caller) can render a specific message.
"""

from typing import Any, Optional


class BookingError(Exception):
    """Base class — kind + human message + structured context."""

    kind: str = "booking_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: dict[str, Any] = {k: v for k, v in context.items() if v is not None}

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.kind, "detail": self.message, **self.context}


class NotFound(BookingError, KeyError):
    """A referenced production, staff member or record does not exist."""

    kind = "not_found"

    def __init__(self, collection: str, doc_id: str) -> None:
        super().__init__(
            f"No {collection} record found with id '{doc_id}'",
            collection=collection,
            id=doc_id,
        )
        self.collection = collection
        self.doc_id = doc_id


class InvalidTransition(BookingError, ValueError):
    """A status change (or an assignment) violates the lifecycle guards."""

    kind = "invalid_transition"

    def __init__(
        self,
        production_id: str,
        from_status: str,
        to_status: str,
        reason: Optional[str] = None,
    ) -> None:
        message = f"Cannot transition production '{production_id}' from '{from_status}' to '{to_status}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            production_id=production_id,
            from_status=from_status,
            to_status=to_status,
            reason=reason,
        )
        self.production_id = production_id
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason


class StoreUnavailable(BookingError):
    """The underlying document store call failed. Never retried here."""

    kind = "store_unavailable"

    def __init__(self, operation: str, collection: str, cause: Optional[BaseException] = None) -> None:
        message = f"Document store unavailable during {operation} on '{collection}'"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, operation=operation, collection=collection)
        self.operation = operation
        self.collection = collection
        self.cause = cause


class Forbidden(BookingError, PermissionError):
    """The actor's capability does not allow a non-lifecycle operation."""

    kind = "forbidden"

    def __init__(self, actor_id: str, capability: str, action: str) -> None:
        super().__init__(
            f"Actor '{actor_id}' with capability '{capability}' may not {action}",
            actor_id=actor_id,
            capability=capability,
            action=action,
        )
        self.actor_id = actor_id
        self.capability = capability
        self.action = action
