"""Document-collection backing store.

Provides the ``documents`` table model and two interchangeable store
implementations (SQLAlchemy async and in-memory) behind one contract.
"""

from app.shared.documents.store import (
    Collection,
    DocumentStore,
    MemoryDocumentStore,
    SqlDocumentStore,
    get_document_store,
    matches,
    open_document_store,
)

__all__ = [
    "Collection",
    "DocumentStore",
    "MemoryDocumentStore",
    "SqlDocumentStore",
    "get_document_store",
    "matches",
    "open_document_store",
]
