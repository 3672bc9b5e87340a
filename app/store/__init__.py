"""
==============================================================================
Store Package - Backend Collaborators
==============================================================================

Storage backends the catalog and admin services talk to.

Modules:
--------
- document_store: Product documents with live snapshot subscriptions
- blob_store: Product image files with retrieval URLs
- local_storage: Per-client named entries (favorites)

Usage:
------
    from app.store import get_document_store, get_blob_store

    store = get_document_store()
    unsubscribe = store.subscribe(catalog.on_snapshot)

==============================================================================
"""

from functools import lru_cache

from app.config import get_settings
from app.db.database import get_database_manager

from .blob_store import BlobMetadata, BlobStore
from .document_store import DocumentStore, PushKeyGenerator
from .local_storage import LocalStorage


@lru_cache(maxsize=1)
def get_document_store() -> DocumentStore:
    """Get the global product document store."""
    db_manager = get_database_manager()
    db_manager.create_tables()
    return DocumentStore(db_manager.get_session)


@lru_cache(maxsize=1)
def get_blob_store() -> BlobStore:
    """Get the global image store."""
    settings = get_settings()
    return BlobStore(settings.blob_path, settings.media_url_prefix)


@lru_cache(maxsize=1)
def get_local_storage() -> LocalStorage:
    """Get the global client storage."""
    return LocalStorage(get_settings().local_storage_path)


__all__ = [
    "BlobMetadata",
    "BlobStore",
    "DocumentStore",
    "LocalStorage",
    "PushKeyGenerator",
    "get_blob_store",
    "get_document_store",
    "get_local_storage",
]
