# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: SQLAlchemy-backed document store.

Every collection shares one ``documents`` table holding JSON payloads. String-valued
filters (equality, ranges, ``in``, ``array-contains``) are pushed into the
WHERE clause through the dialect's JSON operators (SQLite, PostgreSQL). Every
filter is then re-applied to the decoded documents, and ordering happens there
too, so each backend answers queries identically.
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool

from booking.core.exceptions import NotFound, StoreUnavailable
from booking.core.logging import get_logger
from booking.repositories.document_store import (
    DocumentStore, Filter, Order, matches, new_id, sort_documents,
)

logger = get_logger(__name__)

SQL_OPERATORS = {"==": "=", "<": "<", "<=": "<=", ">": ">", ">=": ">="}
_FIELD_PATH = re.compile(r"^[A-Za-z_]\w*(\.[A-Za-z_]\w*)*$")

SCHEMA = """
    CREATE TABLE IF NOT EXISTS documents (
        collection  VARCHAR(64)  NOT NULL,
        id          VARCHAR(64)  NOT NULL,
        data        TEXT         NOT NULL,
        created_at  TIMESTAMP    NOT NULL,
        updated_at  TIMESTAMP    NOT NULL,
        PRIMARY KEY (collection, id)
    )
"""


def json_field(dialect: str, path: str) -> Optional[str]:
    """SQL expression for a dotted document path, or None if the dialect has none."""
    if not _FIELD_PATH.match(path):
        return None
    if dialect == "sqlite":
        return f"json_extract(data, '$.{path}')"
    if dialect == "postgresql":
        return f"(CAST(data AS jsonb) #>> '{{{','.join(path.split('.'))}}}')"
    return None


def where_clauses(dialect: str, filters: Sequence[Filter]) -> tuple[list[str], dict[str, Any]]:
    """Translate the string-valued filters SQL can answer; others stay in Python."""
    clauses: list[str] = []
    params: dict[str, Any] = {}
    for i, flt in enumerate(filters):
        column = json_field(dialect, flt.field)
        if column is None:
            continue
        name = f"f{i}"
        if flt.op in SQL_OPERATORS and isinstance(flt.value, str):
            clauses.append(f"{column} {SQL_OPERATORS[flt.op]} :{name}")
            params[name] = flt.value
        elif flt.op == "in" and flt.value and all(isinstance(v, str) for v in flt.value):
            names = [f"{name}_{j}" for j in range(len(flt.value))]
            clauses.append(f"{column} IN ({', '.join(':' + n for n in names)})")
            params.update(zip(names, flt.value))
        elif flt.op == "array-contains" and isinstance(flt.value, str):
            if dialect == "sqlite":
                clauses.append(
                    f"EXISTS (SELECT 1 FROM json_each(data, '$.{flt.field}') WHERE value = :{name})"
                )
            else:
                array = column.replace("#>>", "#>")
                clauses.append(f"{array} @> jsonb_build_array(CAST(:{name} AS text))")
            params[name] = flt.value
    return clauses, params


class SqlDocumentStore(DocumentStore):
    def __init__(self, engine: Engine):
        self._engine = engine

    def create_schema(self) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(text(SCHEMA))
        except SQLAlchemyError as exc:
            logger.error("Failed to create documents table: %s", exc)
            raise StoreUnavailable("create_schema", "documents", exc) from exc

    # ── Read ───────────────────────────────────────────────────────────

    async def query(
        self,
        collection: str,
        filters: Sequence[Filter] = (),
        ordering: Sequence[Order] = (),
        limit: Optional[int] = None,
    ) -> list[dict[str, Any]]:
        rows = await run_in_threadpool(self._select_collection, collection, filters)
        documents = [doc for doc in rows if matches(doc, filters)]
        documents = sort_documents(documents, ordering)
        return documents[:limit] if limit is not None else documents

    async def get(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        return await run_in_threadpool(self._select_one, collection, doc_id)

    # ── Write ──────────────────────────────────────────────────────────

    async def update(self, collection: str, doc_id: str, patch: dict[str, Any]) -> None:
        await run_in_threadpool(self._merge, collection, doc_id, patch)

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        doc = dict(data)
        doc["id"] = doc.get("id") or new_id()
        await run_in_threadpool(self._insert, collection, doc)
        return doc["id"]

    async def delete(self, collection: str, doc_id: str) -> None:
        await run_in_threadpool(self._remove, collection, doc_id)

    def verify_connection(self) -> None:
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self._engine.dispose()

    # ── Private (blocking, run in the thread pool) ─────────────────────

    def _select_collection(self, collection: str, filters: Sequence[Filter] = ()) -> list[dict[str, Any]]:
        clauses, params = where_clauses(self._engine.dialect.name, filters)
        sql = "SELECT data FROM documents WHERE collection = :c"
        sql += "".join(f" AND {clause}" for clause in clauses)
        sql += " ORDER BY created_at"
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(text(sql), {"c": collection, **params}).fetchall()
        except SQLAlchemyError as exc:
            logger.error("Query failed on %s: %s", collection, exc)
            raise StoreUnavailable("query", collection, exc) from exc
        return [json.loads(r[0]) for r in rows]

    def _select_one(self, collection: str, doc_id: str) -> Optional[dict[str, Any]]:
        try:
            with self._engine.connect() as conn:
                row = conn.execute(
                    text("SELECT data FROM documents WHERE collection = :c AND id = :id"),
                    {"c": collection, "id": doc_id},
                ).fetchone()
        except SQLAlchemyError as exc:
            logger.error("Get failed on %s/%s: %s", collection, doc_id, exc)
            raise StoreUnavailable("get", collection, exc) from exc
        return json.loads(row[0]) if row else None

    def _merge(self, collection: str, doc_id: str, patch: dict[str, Any]) -> None:
        try:
            with self._engine.begin() as conn:
                row = conn.execute(
                    text("SELECT data FROM documents WHERE collection = :c AND id = :id"),
                    {"c": collection, "id": doc_id},
                ).fetchone()
                if not row:
                    raise NotFound(collection, doc_id)
                doc = json.loads(row[0])
                doc.update(patch)
                conn.execute(
                    text("""
                        UPDATE documents SET data = :data, updated_at = :ts
                        WHERE collection = :c AND id = :id
                    """),
                    {"data": json.dumps(doc), "ts": datetime.now(timezone.utc),
                     "c": collection, "id": doc_id},
                )
        except SQLAlchemyError as exc:
            logger.error("Update failed on %s/%s: %s", collection, doc_id, exc)
            raise StoreUnavailable("update", collection, exc) from exc

    def _insert(self, collection: str, doc: dict[str, Any]) -> None:
        now = datetime.now(timezone.utc)
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    text("""
                        INSERT INTO documents (collection, id, data, created_at, updated_at)
                        VALUES (:c, :id, :data, :ts, :ts)
                    """),
                    {"c": collection, "id": doc["id"], "data": json.dumps(doc), "ts": now},
                )
        except SQLAlchemyError as exc:
            logger.error("Insert failed on %s: %s", collection, exc)
            raise StoreUnavailable("add", collection, exc) from exc

    def _remove(self, collection: str, doc_id: str) -> None:
        try:
            with self._engine.begin() as conn:
                result = conn.execute(
                    text("DELETE FROM documents WHERE collection = :c AND id = :id"),
                    {"c": collection, "id": doc_id},
                )
        except SQLAlchemyError as exc:
            logger.error("Delete failed on %s/%s: %s", collection, doc_id, exc)
            raise StoreUnavailable("delete", collection, exc) from exc
        if result.rowcount == 0:
            raise NotFound(collection, doc_id)
