"""
==============================================================================
Document Store Tests
==============================================================================

Tests for push keys, writes and snapshot subscriptions.

==============================================================================
"""

from typing import Dict, List

import pytest

from app.store.blob_store import BlobStore
from app.store.document_store import DocumentStore, PushKeyGenerator
from app.store.local_storage import LocalStorage


class TestPushKeyGenerator:
    """Tests for generated document keys."""

    def test_keys_have_fixed_length(self):
        key = PushKeyGenerator().generate()
        assert len(key) == 20

    def test_keys_sort_in_generation_order(self):
        """Keys from the same millisecond still sort in order."""
        generator = PushKeyGenerator(clock=lambda: 1700000000.0)
        keys = [generator.generate() for _ in range(50)]

        assert len(set(keys)) == 50
        assert sorted(keys) == keys

    def test_later_time_sorts_later(self):
        times = iter([1700000000.0, 1700000001.0])
        generator = PushKeyGenerator(clock=lambda: next(times))
        first, second = generator.generate(), generator.generate()
        assert first < second


class TestDocumentStore:
    """Tests for DocumentStore writes and subscriptions."""

    def test_subscribe_delivers_current_snapshot(self, document_store: DocumentStore):
        """A new subscriber gets the collection immediately."""
        document_store.set("k1", {"name": "Ring"})
        received: List[Dict] = []

        document_store.subscribe(received.append)

        assert received == [{"k1": {"name": "Ring"}}]

    def test_every_write_publishes_full_snapshot(self, document_store: DocumentStore):
        received: List[Dict] = []
        document_store.subscribe(received.append)

        document_store.set("k1", {"name": "Ring"})
        document_store.set("k2", {"name": "Chain"})
        document_store.remove("k1")

        assert received[-1] == {"k2": {"name": "Chain"}}
        assert len(received) == 4

    def test_unsubscribe_stops_delivery(self, document_store: DocumentStore):
        received: List[Dict] = []
        unsubscribe = document_store.subscribe(received.append)
        unsubscribe()

        document_store.set("k1", {"name": "Ring"})

        assert len(received) == 1
        assert document_store.subscriber_count == 0

    def test_failing_subscriber_does_not_block_others(self, document_store: DocumentStore):
        def broken(snapshot):
            raise RuntimeError("boom")

        received: List[Dict] = []
        document_store.subscribe(broken)
        document_store.subscribe(received.append)

        document_store.set("k1", {"name": "Ring"})

        assert received[-1] == {"k1": {"name": "Ring"}}

    def test_set_replaces_whole_document(self, document_store: DocumentStore):
        document_store.set("k1", {"name": "Ring", "price": "100"})
        document_store.set("k1", {"name": "Band"})

        assert document_store.get("k1") == {"name": "Band"}

    def test_update_merges_and_none_clears(self, document_store: DocumentStore):
        document_store.set("k1", {"name": "Ring", "price": "100", "inStock": True})
        document_store.update("k1", {"inStock": False, "price": None})

        assert document_store.get("k1") == {"name": "Ring", "inStock": False}

    def test_remove_missing_is_noop(self, document_store: DocumentStore):
        received: List[Dict] = []
        document_store.subscribe(received.append)

        document_store.remove("missing")

        assert len(received) == 1

    def test_snapshot_orders_by_key(self, document_store: DocumentStore):
        keys = [document_store.push_key() for _ in range(3)]
        for key in reversed(keys):
            document_store.set(key, {"name": key})

        assert list(document_store.snapshot()) == keys

    def test_rejects_unknown_and_nested_fields(self, document_store: DocumentStore):
        with pytest.raises(ValueError):
            document_store.set("k1", {"name": "Ring", "color": "gold"})
        with pytest.raises(ValueError):
            document_store.set("k1", {"name": {"en": "Ring"}})
        with pytest.raises(ValueError):
            document_store.update("k1", {"inStock": "yes"})


class TestBlobStore:
    """Tests for the image store."""

    def test_upload_and_download_url(self, blob_store: BlobStore):
        blob_store.upload_bytes("products/k1", b"\x89PNG data", "image/png")

        url = blob_store.get_download_url("products/k1")

        assert url.startswith("/media/products/k1?token=")
        assert blob_store.resolve_path("products/k1").read_bytes() == b"\x89PNG data"
        assert blob_store.get_metadata("products/k1").content_type == "image/png"

    def test_reupload_changes_token(self, blob_store: BlobStore):
        blob_store.upload_bytes("products/k1", b"one", "image/png")
        first = blob_store.get_download_url("products/k1")
        blob_store.upload_bytes("products/k1", b"two", "image/png")

        assert blob_store.get_download_url("products/k1") != first

    def test_missing_key(self, blob_store: BlobStore):
        with pytest.raises(FileNotFoundError):
            blob_store.get_download_url("products/nothing")
        assert blob_store.resolve_path("products/nothing") is None

    def test_rejects_path_traversal(self, blob_store: BlobStore):
        with pytest.raises(ValueError):
            blob_store.upload_bytes("../escape", b"x", "image/png")


class TestLocalStorage:
    """Tests for per-client storage."""

    def test_set_get_remove(self, local_storage: LocalStorage):
        assert local_storage.get_item("client-1", "key") is None

        local_storage.set_item("client-1", "key", "value")
        assert local_storage.get_item("client-1", "key") == "value"

        local_storage.remove_item("client-1", "key")
        assert local_storage.get_item("client-1", "key") is None

    def test_clients_are_isolated(self, local_storage: LocalStorage):
        local_storage.set_item("client-1", "key", "one")
        assert local_storage.get_item("client-2", "key") is None

    def test_invalid_client_id(self, local_storage: LocalStorage):
        with pytest.raises(ValueError):
            local_storage.get_item("../etc", "key")
