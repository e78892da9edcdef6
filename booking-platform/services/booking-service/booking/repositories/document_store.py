# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Document store contract.

query / get / update / add over named collections of JSON-compatible
documents, with equality, range, membership and array-contains filters on
dotted field paths. Backends live in memory_store.py and sql_store.py.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence

FILTER_OPS = ("==", "!=", "<", "<=", ">", ">=", "in", "array-contains")

_MISSING = object()


@dataclass(frozen=True)
class Filter:
    field: str
    op: str
    value: Any

    def __post_init__(self) -> None:
        if self.op not in FILTER_OPS:
            raise ValueError(f"Unsupported filter operator '{self.op}'")


@dataclass(frozen=True)
class Order:
    field: str
    descending: bool = False


def get_field(document: dict[str, Any], path: str, default: Any = _MISSING) -> Any:
    """Resolve a dotted path such as ``assignedStaff.director``."""
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, dict) or part not in current:
            return None if default is _MISSING else default
        current = current[part]
    return current


def _matches_one(document: dict[str, Any], flt: Filter) -> bool:
    value = get_field(document, flt.field)
    if flt.op == "==":
        return value == flt.value
    if flt.op == "!=":
        return value is not None and value != flt.value
    if flt.op == "in":
        return value in flt.value
    if flt.op == "array-contains":
        return isinstance(value, list) and flt.value in value
    if value is None:
        return False
    if flt.op == "<":
        return value < flt.value
    if flt.op == "<=":
        return value <= flt.value
    if flt.op == ">":
        return value > flt.value
    return value >= flt.value


def matches(document: dict[str, Any], filters: Iterable[Filter]) -> bool:
    return all(_matches_one(document, f) for f in filters)


def _sort_key(value: Any) -> tuple:
    return (0, "") if value is None else (1, value)


def sort_documents(
    documents: list[dict[str, Any]],
    ordering: Sequence[Order],
) -> list[dict[str, Any]]:
    """Stable multi-key sort; documents missing a key sort first."""
    result = list(documents)
    for order in reversed(ordering):
        result.sort(key=lambda d: _sort_key(get_field(d, order.field)), reverse=order.descending)
    return result


def new_id() -> str:
    return str(uuid.uuid4())


class DocumentStore(ABC):
    """Async request/response contract shared by every backend."""

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        ordering: Sequence[Order] = (),
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    async def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        ...

    @abstractmethod
    async def update(self, collection: str, doc_id: str, patch: dict[str, Any]) -> None:
        """Shallow merge of ``patch`` into the stored document. NotFound if absent."""

    @abstractmethod
    async def add(self, collection: str, data: dict[str, Any]) -> str:
        """Insert a document, returning its id (``data["id"]`` or a fresh uuid)."""

    @abstractmethod
    async def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document. NotFound if absent."""

    async def count(self, collection: str, filters: Sequence[Filter] = ()) -> int:
        return len(await self.query(collection, filters))

    def verify_connection(self) -> None:
        """Raise if the backend cannot serve traffic."""

    def dispose(self) -> None:
        """Release backend resources."""
