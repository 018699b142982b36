"""Document-collection store used by the seeder and the backup manager.

The seeder only ever talks to the backing store through this contract:

- ``DocumentStore.collection(name)`` returns a :class:`Collection` exposing
  ``create``, ``insert_many``, ``find``, ``find_one``, ``count_documents``,
  ``save`` and ``delete_many``.
- ``DocumentStore.list_collections()`` and ``clear_all()`` operate on every
  collection at once (used for clear-database steps and restores).

Queries are equality matches on (optionally dotted) top-level fields. A list
field matches when it contains the expected value, and ``{"$in": [...]}``
matches any of the listed values.

Two implementations share the contract: :class:`SqlDocumentStore` persists to
the ``documents`` table through SQLAlchemy async sessions, and
:class:`MemoryDocumentStore` keeps everything in process (dry runs, tests).
"""

from __future__ import annotations

import copy
import uuid
from abc import ABC, abstractmethod
from collections.abc import AsyncGenerator, Iterable, Mapping
from contextlib import asynccontextmanager
from typing import Any

from pydantic_core import to_jsonable_python
from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.config import get_settings
from app.core.database import create_tables, get_engine, get_session_maker
from app.core.exceptions import PersistenceError
from app.core.logging import get_logger
from app.shared.documents.models import Document

logger = get_logger(__name__)

Query = Mapping[str, Any]


def _resolve(document: Mapping[str, Any], path: str) -> Any:
    value: Any = document
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def matches(document: Mapping[str, Any], query: Query | None) -> bool:
    """Check whether a document satisfies a query.

    Args:
        document: Stored document.
        query: Field/value pairs; ``None`` or ``{}`` matches everything.

    Returns:
        True when every query clause matches.
    """
    if not query:
        return True
    for key, expected in query.items():
        value = _resolve(document, key)
        if isinstance(expected, Mapping) and "$in" in expected:
            candidates = list(expected["$in"])
            if isinstance(value, list):
                if not any(item in candidates for item in value):
                    return False
            elif value not in candidates:
                return False
        elif isinstance(value, list) and not isinstance(expected, list):
            if expected not in value:
                return False
        elif value != expected:
            return False
    return True


def to_document(document: Mapping[str, Any]) -> dict[str, Any]:
    """Convert a generated record into its JSON-compatible stored form.

    Datetimes become ISO-8601 strings, tuples become lists. An ``_id`` is
    assigned when the record does not carry one.
    """
    stored: dict[str, Any] = to_jsonable_python(dict(document))
    if not stored.get("_id"):
        stored["_id"] = uuid.uuid4().hex
    return stored


class Collection(ABC):
    """A named set of JSON documents."""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    async def create(self, document: Mapping[str, Any]) -> dict[str, Any]:
        """Insert one document and return its stored form.

        Raises:
            PersistenceError: If the write fails (including duplicate ``_id``).
        """

    @abstractmethod
    async def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> int:
        """Insert documents in one write and return how many were stored."""

    @abstractmethod
    async def find(self, query: Query | None = None, limit: int | None = None) -> list[dict[str, Any]]:
        """Return matching documents in insertion order, at most ``limit``."""

    @abstractmethod
    async def count_documents(self, query: Query | None = None) -> int:
        """Count matching documents."""

    @abstractmethod
    async def save(self, document: Mapping[str, Any]) -> dict[str, Any]:
        """Insert or replace a document by ``_id``."""

    @abstractmethod
    async def delete_many(self, query: Query | None = None) -> int:
        """Delete matching documents and return how many were removed."""

    async def find_one(self, query: Query | None = None) -> dict[str, Any] | None:
        """Return the first matching document, if any."""
        found = await self.find(query, limit=1)
        return found[0] if found else None


class DocumentStore(ABC):
    """A named database of collections."""

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def collection(self, name: str) -> Collection:
        """Get a collection handle (collections exist once they hold a document)."""

    @abstractmethod
    async def list_collections(self) -> list[str]:
        """Names of collections currently holding at least one document, sorted."""

    async def clear_all(self) -> dict[str, int]:
        """Delete every document from every collection.

        Returns:
            Number of documents removed per collection.
        """
        removed: dict[str, int] = {}
        for name in await self.list_collections():
            removed[name] = await self.collection(name).delete_many({})
        logger.info(
            "documents.store.cleared",
            store=self.name,
            collections=len(removed),
            documents=sum(removed.values()),
        )
        return removed

    async def counts(self) -> dict[str, int]:
        """Document count per non-empty collection."""
        return {
            name: await self.collection(name).count_documents()
            for name in await self.list_collections()
        }


# =============================================================================
# In-memory implementation
# =============================================================================


class MemoryCollection(Collection):
    """Collection backed by an insertion-ordered dict."""

    def __init__(self, name: str, documents: dict[str, dict[str, Any]]) -> None:
        super().__init__(name)
        self._documents = documents

    async def create(self, document: Mapping[str, Any]) -> dict[str, Any]:
        stored = to_document(document)
        if stored["_id"] in self._documents:
            raise PersistenceError(
                f"Duplicate _id in {self.name}: {stored['_id']}",
                details={"collection": self.name, "_id": stored["_id"]},
            )
        self._documents[stored["_id"]] = stored
        return copy.deepcopy(stored)

    async def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> int:
        batch = [to_document(document) for document in documents]
        ids = [doc["_id"] for doc in batch]
        duplicates = {doc_id for doc_id in ids if doc_id in self._documents}
        if duplicates or len(set(ids)) != len(ids):
            raise PersistenceError(
                f"Duplicate _id values in {self.name}",
                details={"collection": self.name, "duplicates": sorted(duplicates)},
            )
        for doc in batch:
            self._documents[doc["_id"]] = doc
        return len(batch)

    async def find(self, query: Query | None = None, limit: int | None = None) -> list[dict[str, Any]]:
        found: list[dict[str, Any]] = []
        for document in self._documents.values():
            if matches(document, query):
                found.append(copy.deepcopy(document))
                if limit is not None and len(found) >= limit:
                    break
        return found

    async def count_documents(self, query: Query | None = None) -> int:
        if not query:
            return len(self._documents)
        return sum(1 for document in self._documents.values() if matches(document, query))

    async def save(self, document: Mapping[str, Any]) -> dict[str, Any]:
        stored = to_document(document)
        self._documents[stored["_id"]] = stored
        return copy.deepcopy(stored)

    async def delete_many(self, query: Query | None = None) -> int:
        doomed = [doc_id for doc_id, doc in self._documents.items() if matches(doc, query)]
        for doc_id in doomed:
            del self._documents[doc_id]
        return len(doomed)


class MemoryDocumentStore(DocumentStore):
    """Process-local document store."""

    def __init__(self, name: str = "memory") -> None:
        super().__init__(name)
        self._data: dict[str, dict[str, dict[str, Any]]] = {}

    def collection(self, name: str) -> MemoryCollection:
        return MemoryCollection(name, self._data.setdefault(name, {}))

    async def list_collections(self) -> list[str]:
        return sorted(name for name, documents in self._data.items() if documents)


# =============================================================================
# SQLAlchemy implementation
# =============================================================================


class SqlCollection(Collection):
    """Collection stored as rows of the ``documents`` table.

    Each call runs in its own session and commits before returning, so
    writes from earlier pipeline steps survive a later failure.
    """

    def __init__(self, name: str, session_maker: async_sessionmaker[AsyncSession]) -> None:
        super().__init__(name)
        self._session_maker = session_maker

    def _failure(self, operation: str, exc: SQLAlchemyError) -> PersistenceError:
        logger.error(
            "documents.write_failed",
            collection=self.name,
            operation=operation,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return PersistenceError(
            f"{operation} on {self.name} failed: {exc}",
            details={"collection": self.name, "operation": operation},
        )

    async def create(self, document: Mapping[str, Any]) -> dict[str, Any]:
        stored = to_document(document)
        try:
            async with self._session_maker() as session:
                session.add(Document(collection=self.name, doc_id=stored["_id"], payload=stored))
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failure("create", e) from e
        return stored

    async def insert_many(self, documents: Iterable[Mapping[str, Any]]) -> int:
        batch = [to_document(document) for document in documents]
        if not batch:
            return 0
        try:
            async with self._session_maker() as session:
                session.add_all(
                    Document(collection=self.name, doc_id=doc["_id"], payload=doc) for doc in batch
                )
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failure("insert_many", e) from e
        return len(batch)

    async def find(self, query: Query | None = None, limit: int | None = None) -> list[dict[str, Any]]:
        stmt = select(Document.payload).where(Document.collection == self.name)
        remaining = dict(query or {})
        # _id is indexed through doc_id; everything else is matched on the payload
        doc_id = remaining.pop("_id", None)
        if isinstance(doc_id, str):
            stmt = stmt.where(Document.doc_id == doc_id)
        elif doc_id is not None:
            remaining["_id"] = doc_id
        stmt = stmt.order_by(Document.id)
        if not remaining and limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                payloads = [row[0] for row in result.fetchall()]
        except SQLAlchemyError as e:
            raise self._failure("find", e) from e

        found: list[dict[str, Any]] = []
        for payload in payloads:
            if matches(payload, remaining):
                found.append(payload)
                if limit is not None and len(found) >= limit:
                    break
        return found

    async def count_documents(self, query: Query | None = None) -> int:
        if query:
            return len(await self.find(query))
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(func.count()).select_from(Document).where(Document.collection == self.name)
                )
                return int(result.scalar() or 0)
        except SQLAlchemyError as e:
            raise self._failure("count_documents", e) from e

    async def save(self, document: Mapping[str, Any]) -> dict[str, Any]:
        stored = to_document(document)
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(Document).where(
                        Document.collection == self.name,
                        Document.doc_id == stored["_id"],
                    )
                )
                row = result.scalar_one_or_none()
                if row is None:
                    session.add(Document(collection=self.name, doc_id=stored["_id"], payload=stored))
                else:
                    row.payload = stored
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failure("save", e) from e
        return stored

    async def delete_many(self, query: Query | None = None) -> int:
        stmt = delete(Document).where(Document.collection == self.name)
        if query:
            doc_ids = [doc["_id"] for doc in await self.find(query)]
            if not doc_ids:
                return 0
            stmt = stmt.where(Document.doc_id.in_(doc_ids))
        try:
            async with self._session_maker() as session:
                result = await session.execute(stmt)
                await session.commit()
        except SQLAlchemyError as e:
            raise self._failure("delete_many", e) from e
        row_count = getattr(result, "rowcount", None)
        return row_count if row_count is not None else 0


class SqlDocumentStore(DocumentStore):
    """Document store persisted through SQLAlchemy async sessions."""

    def __init__(
        self,
        session_maker: async_sessionmaker[AsyncSession],
        name: str | None = None,
    ) -> None:
        super().__init__(name or get_settings().database_name)
        self._session_maker = session_maker

    def collection(self, name: str) -> SqlCollection:
        return SqlCollection(name, self._session_maker)

    async def list_collections(self) -> list[str]:
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(Document.collection).distinct().order_by(Document.collection)
                )
                return [row[0] for row in result.fetchall()]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Listing collections failed: {e}") from e


@asynccontextmanager
async def open_document_store(
    database_url: str | None = None,
    create_schema: bool = False,
) -> AsyncGenerator[SqlDocumentStore, None]:
    """Open a SQL-backed document store and dispose of its engine afterwards.

    Args:
        database_url: Override for ``settings.database_url``.
        create_schema: Create the ``documents`` table when missing.

    Yields:
        Ready-to-use SqlDocumentStore.
    """
    engine = get_engine(database_url)
    if create_schema:
        await create_tables(engine)
    store = SqlDocumentStore(get_session_maker(engine))
    try:
        yield store
    finally:
        await engine.dispose()


async def get_document_store() -> AsyncGenerator[DocumentStore, None]:
    """FastAPI dependency yielding the configured document store."""
    async with open_document_store() as store:
        yield store
