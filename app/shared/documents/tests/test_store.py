"""Tests for the document store contract on both implementations."""

from datetime import UTC, datetime

import pytest
import pytest_asyncio

from app.core.exceptions import PersistenceError
from app.shared.documents import MemoryDocumentStore, matches, open_document_store


@pytest_asyncio.fixture(params=["memory", "sql"])
async def doc_store(request, tmp_path):
    """The in-memory store and a SQL store on a fresh SQLite file."""
    if request.param == "memory":
        yield MemoryDocumentStore("test")
        return
    async with open_document_store(f"sqlite+aiosqlite:///{tmp_path / 'docs.db'}", create_schema=True) as store:
        yield store


class TestMatches:
    """Tests for query matching."""

    def test_empty_query_matches_everything(self):
        assert matches({"a": 1}, None)
        assert matches({"a": 1}, {})

    def test_equality_and_dotted_paths(self):
        """Test plain and nested field equality."""
        doc = {"name": "Ada", "invitee": {"email": "ada@example.com"}}

        assert matches(doc, {"name": "Ada", "invitee.email": "ada@example.com"})
        assert not matches(doc, {"invitee.email": "other@example.com"})
        assert not matches(doc, {"name.first": "Ada"})

    def test_list_contains(self):
        """Test a scalar matches a list field containing it."""
        doc = {"assignees": ["u1", "u2"]}

        assert matches(doc, {"assignees": "u2"})
        assert not matches(doc, {"assignees": "u3"})
        assert matches(doc, {"assignees": ["u1", "u2"]})

    def test_in_operator(self):
        """Test $in matches scalars and list overlaps."""
        assert matches({"role": "admin"}, {"role": {"$in": ["admin", "super_admin"]}})
        assert not matches({"role": "user"}, {"role": {"$in": ["admin"]}})
        assert matches({"tags": ["a", "b"]}, {"tags": {"$in": ["b"]}})

    def test_missing_field(self):
        assert not matches({}, {"name": "Ada"})
        assert matches({}, {"name": None})


class TestCollection:
    """Tests for collection operations."""

    @pytest.mark.asyncio
    async def test_create_returns_json_form(self, doc_store):
        """Test datetimes are stored as ISO strings and ids are kept."""
        stored = await doc_store.collection("users").create(
            {"_id": "u1", "created_at": datetime(2025, 1, 1, tzinfo=UTC), "tags": ("a", "b")}
        )

        assert stored["_id"] == "u1"
        assert stored["created_at"] == "2025-01-01T00:00:00Z"
        assert stored["tags"] == ["a", "b"]
        assert await doc_store.collection("users").find_one({"_id": "u1"}) == stored

    @pytest.mark.asyncio
    async def test_create_assigns_missing_id(self, doc_store):
        stored = await doc_store.collection("users").create({"name": "Ada"})

        assert stored["_id"]

    @pytest.mark.asyncio
    async def test_duplicate_id_raises(self, doc_store):
        """Test a second document with the same id is rejected."""
        users = doc_store.collection("users")
        await users.create({"_id": "u1"})

        with pytest.raises(PersistenceError):
            await users.create({"_id": "u1"})

    @pytest.mark.asyncio
    async def test_same_id_in_different_collections(self, doc_store):
        """Test ids are unique per collection only."""
        await doc_store.collection("users").create({"_id": "x"})
        await doc_store.collection("tasks").create({"_id": "x"})

        assert await doc_store.counts() == {"tasks": 1, "users": 1}

    @pytest.mark.asyncio
    async def test_find_order_filter_and_limit(self, doc_store):
        """Test find keeps insertion order and honours query and limit."""
        tasks = doc_store.collection("tasks")
        await tasks.insert_many(
            {"_id": f"t{i}", "board": "b1" if i % 2 == 0 else "b2"} for i in range(6)
        )

        assert [doc["_id"] for doc in await tasks.find()] == ["t0", "t1", "t2", "t3", "t4", "t5"]
        assert [doc["_id"] for doc in await tasks.find({"board": "b1"})] == ["t0", "t2", "t4"]
        assert [doc["_id"] for doc in await tasks.find({"board": "b2"}, limit=2)] == ["t1", "t3"]
        assert [doc["_id"] for doc in await tasks.find(limit=1)] == ["t0"]
        assert await tasks.find_one({"board": "missing"}) is None

    @pytest.mark.asyncio
    async def test_count_documents(self, doc_store):
        users = doc_store.collection("users")
        await users.insert_many([{"_id": "a", "role": "admin"}, {"_id": "b", "role": "user"}])

        assert await users.count_documents() == 2
        assert await users.count_documents({"role": "admin"}) == 1

    @pytest.mark.asyncio
    async def test_insert_many_empty(self, doc_store):
        assert await doc_store.collection("users").insert_many([]) == 0

    @pytest.mark.asyncio
    async def test_save_upserts(self, doc_store):
        """Test save inserts new documents and replaces existing ones."""
        boards = doc_store.collection("boards")
        await boards.save({"_id": "b1", "columns": []})
        await boards.save({"_id": "b1", "columns": ["c1"]})

        assert await boards.count_documents() == 1
        assert (await boards.find_one({"_id": "b1"}))["columns"] == ["c1"]

    @pytest.mark.asyncio
    async def test_delete_many(self, doc_store):
        """Test deletes by query and returns the removed count."""
        users = doc_store.collection("users")
        await users.insert_many([{"_id": "a", "role": "admin"}, {"_id": "b", "role": "user"}])

        assert await users.delete_many({"role": "admin"}) == 1
        assert await users.delete_many({"role": "admin"}) == 0
        assert await users.delete_many({}) == 1


class TestDocumentStore:
    """Tests for store-wide operations."""

    @pytest.mark.asyncio
    async def test_list_collections_skips_empty(self, doc_store):
        """Test only collections holding documents are listed, sorted."""
        await doc_store.collection("users").create({"_id": "u1"})
        await doc_store.collection("boards").create({"_id": "b1"})
        await doc_store.collection("boards").delete_many({})
        doc_store.collection("never_written")

        assert await doc_store.list_collections() == ["users"]

    @pytest.mark.asyncio
    async def test_clear_all(self, doc_store):
        """Test clearing removes everything and reports per collection."""
        await doc_store.collection("users").insert_many([{"_id": "u1"}, {"_id": "u2"}])
        await doc_store.collection("tasks").create({"_id": "t1"})

        removed = await doc_store.clear_all()

        assert removed == {"tasks": 1, "users": 2}
        assert await doc_store.list_collections() == []
        assert await doc_store.counts() == {}
