"""
==============================================================================
Pytest Configuration and Fixtures
==============================================================================

Provides test stores, client, and authentication fixtures.

==============================================================================
"""

import pytest
from pathlib import Path
from typing import Dict, Generator, List

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.database import Base
from app.db import models  # noqa: F401  registers the products table
from app.core.security import get_security_manager
from app.store import get_blob_store, get_document_store, get_local_storage
from app.store.blob_store import BlobStore
from app.store.document_store import DocumentStore
from app.store.local_storage import LocalStorage


# ============================================================================
# SAMPLE DATA
# ============================================================================

SAMPLE_PRODUCTS: List[Dict] = [
    {
        "name": "Gold Ring",
        "weight": "5g",
        "category": "Rings",
        "description": "Classic band",
        "inStock": True,
    },
    {
        "name": "Heavy Necklace",
        "weight": "25.5 g",
        "category": "Necklaces",
        "description": "Temple design",
        "inStock": False,
    },
    {
        "name": "Anklet",
        "weight": "12g",
        "category": "Anklets",
        "description": "Pair of anklets with bells",
    },
    {
        "name": "bangle",
        "weight": "abc",
        "category": "Rings",
        "inStock": True,
    },
]


# ============================================================================
# STORE FIXTURES
# ============================================================================

# In-memory SQLite for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def document_store() -> Generator[DocumentStore, None, None]:
    """Create a fresh document store for each test."""
    Base.metadata.create_all(bind=engine)
    try:
        yield DocumentStore(TestingSessionLocal)
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def blob_store(tmp_path: Path) -> BlobStore:
    """Image store rooted in a temporary directory."""
    return BlobStore(tmp_path / "blobs", "/media")


@pytest.fixture
def local_storage(tmp_path: Path) -> LocalStorage:
    """Client storage rooted in a temporary directory."""
    return LocalStorage(tmp_path / "clients")


@pytest.fixture
def seeded_ids(document_store: DocumentStore) -> List[str]:
    """Write SAMPLE_PRODUCTS in order and return their keys."""
    ids = []
    for product in SAMPLE_PRODUCTS:
        key = document_store.push_key()
        document_store.set(key, product)
        ids.append(key)
    return ids


@pytest.fixture(scope="function")
def client(
    document_store: DocumentStore,
    blob_store: BlobStore,
    local_storage: LocalStorage
) -> Generator[TestClient, None, None]:
    """Create test client with store overrides."""
    app.dependency_overrides[get_document_store] = lambda: document_store
    app.dependency_overrides[get_blob_store] = lambda: blob_store
    app.dependency_overrides[get_local_storage] = lambda: local_storage

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


# ============================================================================
# TOKEN FIXTURES
# ============================================================================

@pytest.fixture
def admin_token() -> str:
    """Create access token for the administrator."""
    security = get_security_manager()
    return security.create_access_token({"sub": "admin", "role": "admin"})


@pytest.fixture
def viewer_token() -> str:
    """Create access token without the admin role."""
    security = get_security_manager()
    return security.create_access_token({"sub": "visitor", "role": "viewer"})


# ============================================================================
# HEADER FIXTURES
# ============================================================================

@pytest.fixture
def admin_headers(admin_token: str) -> Dict[str, str]:
    """Authorization headers for the administrator."""
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def viewer_headers(viewer_token: str) -> Dict[str, str]:
    """Authorization headers for a non-admin token."""
    return {"Authorization": f"Bearer {viewer_token}"}


@pytest.fixture
def client_headers() -> Dict[str, str]:
    """Client identification headers for favorites."""
    return {"X-Client-Id": "browser-test-1"}
