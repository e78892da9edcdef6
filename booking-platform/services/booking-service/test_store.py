# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false

"""
Tests for the document store backends — the in-memory store and the
SQLAlchemy store over SQLite must answer every query identically.
"""

import pytest

from booking.core.dependencies import build_engine
from booking.core.exceptions import NotFound, StoreUnavailable
from booking.repositories.document_store import Filter, Order, get_field
from booking.repositories.memory_store import InMemoryDocumentStore
from booking.repositories.sql_store import SqlDocumentStore, where_clauses


@pytest.fixture(params=["memory", "sql"])
def store(request):
    if request.param == "memory":
        yield InMemoryDocumentStore()
        return
    sql_store = SqlDocumentStore(build_engine("sqlite://"))
    sql_store.create_schema()
    yield sql_store
    sql_store.dispose()


DOCS = [
    {"id": "a", "date": "2024-06-01", "status": "confirmed",
     "assignedStaff": {"cameraOperators": ["alice", "bob"], "director": "carol"}},
    {"id": "b", "date": "2024-06-03", "status": "requested",
     "assignedStaff": {"cameraOperators": [], "director": "alice"}},
    {"id": "c", "date": "2024-06-02", "status": "cancelled",
     "assignedStaff": {"cameraOperators": ["alice"]}},
]


async def seed(store):
    for doc in DOCS:
        await store.add("productions", doc)


class TestFieldPaths:
    def test_dotted_path(self):
        assert get_field(DOCS[0], "assignedStaff.director") == "carol"

    def test_missing_path(self):
        assert get_field(DOCS[2], "assignedStaff.director") is None

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            Filter("status", "like", "conf%")


class TestDocumentStore:
    @pytest.mark.asyncio
    async def test_add_and_get(self, store):
        doc_id = await store.add("staff", {"name": "Alice"})
        doc = await store.get("staff", doc_id)
        assert doc == {"id": doc_id, "name": "Alice"}

    @pytest.mark.asyncio
    async def test_get_missing(self, store):
        assert await store.get("staff", "nope") is None

    @pytest.mark.asyncio
    async def test_array_contains(self, store):
        await seed(store)
        docs = await store.query(
            "productions", [Filter("assignedStaff.cameraOperators", "array-contains", "alice")]
        )
        assert sorted(d["id"] for d in docs) == ["a", "c"]

    @pytest.mark.asyncio
    async def test_scalar_equality_on_nested_field(self, store):
        await seed(store)
        docs = await store.query("productions", [Filter("assignedStaff.director", "==", "alice")])
        assert [d["id"] for d in docs] == ["b"]

    @pytest.mark.asyncio
    async def test_in_and_range_filters_with_ordering(self, store):
        await seed(store)
        docs = await store.query(
            "productions",
            [Filter("status", "in", ["confirmed", "cancelled"]), Filter("date", ">=", "2024-06-01")],
            [Order("date", descending=True)],
        )
        assert [d["id"] for d in docs] == ["c", "a"]

    @pytest.mark.asyncio
    async def test_limit_and_count(self, store):
        await seed(store)
        docs = await store.query("productions", ordering=[Order("date")], limit=2)
        assert [d["id"] for d in docs] == ["a", "c"]
        assert await store.count("productions", [Filter("status", "!=", "cancelled")]) == 2

    @pytest.mark.asyncio
    async def test_update_is_shallow_merge(self, store):
        await seed(store)
        await store.update("productions", "a", {"status": "completed", "assignedStaff": {}})
        doc = await store.get("productions", "a")
        assert doc["status"] == "completed"
        assert doc["assignedStaff"] == {}
        assert doc["date"] == "2024-06-01"

    @pytest.mark.asyncio
    async def test_update_missing(self, store):
        with pytest.raises(NotFound):
            await store.update("productions", "nope", {"status": "completed"})

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self, store):
        await seed(store)
        doc = await store.get("productions", "a")
        doc["assignedStaff"]["cameraOperators"].append("mallory")
        again = await store.get("productions", "a")
        assert "mallory" not in again["assignedStaff"]["cameraOperators"]

    @pytest.mark.asyncio
    async def test_delete(self, store):
        await seed(store)
        await store.delete("productions", "b")
        assert await store.get("productions", "b") is None
        assert await store.count("productions") == 2

    @pytest.mark.asyncio
    async def test_delete_missing(self, store):
        with pytest.raises(NotFound):
            await store.delete("productions", "nope")


class TestSqlPushdown:
    def test_string_filters_become_where_clauses(self):
        clauses, params = where_clauses("sqlite", [
            Filter("status", "in", ["confirmed", "overtime"]),
            Filter("date", ">=", "2024-06-01"),
            Filter("assignedStaff.cameraOperators", "array-contains", "alice"),
        ])
        assert clauses[0] == "json_extract(data, '$.status') IN (:f0_0, :f0_1)"
        assert clauses[1] == "json_extract(data, '$.date') >= :f1"
        assert "json_each(data, '$.assignedStaff.cameraOperators')" in clauses[2]
        assert params == {"f0_0": "confirmed", "f0_1": "overtime", "f1": "2024-06-01", "f2": "alice"}

    def test_non_string_and_negated_filters_stay_in_python(self):
        clauses, params = where_clauses("sqlite", [
            Filter("read", "==", False),
            Filter("status", "!=", "cancelled"),
        ])
        assert clauses == []
        assert params == {}

    def test_postgres_uses_jsonb_paths(self):
        clauses, _ = where_clauses("postgresql", [Filter("assignedStaff.director", "==", "alice")])
        assert clauses == ["(CAST(data AS jsonb) #>> '{assignedStaff,director}') = :f0"]

    def test_unknown_dialect_pushes_nothing(self):
        assert where_clauses("mssql", [Filter("status", "==", "confirmed")]) == ([], {})

    @pytest.mark.asyncio
    async def test_select_returns_only_matching_rows(self):
        store = SqlDocumentStore(build_engine("sqlite://"))
        store.create_schema()
        await seed(store)
        rows = store._select_collection(
            "productions",
            [Filter("assignedStaff.cameraOperators", "array-contains", "alice"),
             Filter("date", "<=", "2024-06-01")],
        )
        assert [r["id"] for r in rows] == ["a"]
        store.dispose()


class TestSqlStoreFailures:
    @pytest.mark.asyncio
    async def test_missing_table_raises_store_unavailable(self):
        store = SqlDocumentStore(build_engine("sqlite://"))
        with pytest.raises(StoreUnavailable) as exc:
            await store.query("productions")
        assert exc.value.operation == "query"
        assert exc.value.to_dict()["error"] == "store_unavailable"
        store.dispose()

    def test_verify_connection(self):
        store = SqlDocumentStore(build_engine("sqlite://"))
        store.verify_connection()
        store.dispose()
