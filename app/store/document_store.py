"""
==============================================================================
Document Store Module
==============================================================================

Key-value document collection with live snapshot subscriptions.

Each product is a flat document (scalar fields only) keyed by a generated,
time-ordered push key. Every successful write publishes a complete snapshot
of the collection to all subscribers; subscribers never receive deltas.

Operations:
-----------
- subscribe(callback)   -> unsubscribe callable; delivers a snapshot now
- push_key()            -> new key, nothing written
- get(key)              -> document or None
- snapshot()            -> {key: document} in key order
- set(key, record)      -> full replace
- update(key, fields)   -> merge, None clears a field
- remove(key)           -> delete, no-op when missing

Writes are last-write-wins at the field level; there is no optimistic
concurrency check.

==============================================================================
"""

from __future__ import annotations

import itertools
import logging
import secrets
import threading
import time
from contextlib import contextmanager
from typing import Any, Callable, Dict, Generator, Mapping, Optional

from sqlalchemy.orm import Session

from app.db.models import ProductDocument


# Module logger
logger = logging.getLogger(__name__)

Document = Dict[str, Any]
Snapshot = Dict[str, Document]
SnapshotCallback = Callable[[Snapshot], None]


class PushKeyGenerator:
    """
    Generator of 20-character, chronologically sortable keys.

    The first 8 characters encode the millisecond timestamp, the last 12
    are random. Keys generated within the same millisecond increment the
    random part so ordering follows generation order.
    """

    ALPHABET = "-0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ_abcdefghijklmnopqrstuvwxyz"
    TIME_CHARS = 8
    RANDOM_CHARS = 12

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._last_time = -1
        self._last_random = [0] * self.RANDOM_CHARS

    def generate(self) -> str:
        base = len(self.ALPHABET)

        with self._lock:
            now = int(self._clock() * 1000)
            if now == self._last_time:
                # Carry the increment through the random digits
                for i in range(self.RANDOM_CHARS - 1, -1, -1):
                    if self._last_random[i] < base - 1:
                        self._last_random[i] += 1
                        break
                    self._last_random[i] = 0
            else:
                self._last_time = now
                self._last_random = [secrets.randbelow(base) for _ in range(self.RANDOM_CHARS)]

            time_chars = []
            for _ in range(self.TIME_CHARS):
                time_chars.append(self.ALPHABET[now % base])
                now //= base

            return "".join(reversed(time_chars)) + "".join(
                self.ALPHABET[i] for i in self._last_random
            )


class DocumentStore:
    """
    SQL-backed document collection with snapshot subscriptions.

    Attributes:
        _session_factory: Callable returning a new SQLAlchemy session
        _subscribers: Registered snapshot callbacks keyed by token

    Example:
        >>> store = DocumentStore(db_manager.get_session)
        >>> unsubscribe = store.subscribe(lambda snap: print(len(snap)))
        0
        >>> key = store.push_key()
        >>> store.set(key, {"name": "Ring", "weight": "5g", "category": "Rings"})
        1
    """

    ALLOWED_FIELDS = frozenset(ProductDocument.FIELD_COLUMNS)

    def __init__(
        self,
        session_factory: Callable[[], Session],
        key_generator: Optional[PushKeyGenerator] = None
    ) -> None:
        self._session_factory = session_factory
        self._keys = key_generator or PushKeyGenerator()
        self._subscribers: Dict[int, SnapshotCallback] = {}
        self._tokens = itertools.count(1)
        self._lock = threading.RLock()

    # =========================================================================
    # SESSION MANAGEMENT
    # =========================================================================

    @contextmanager
    def _session_scope(self) -> Generator[Session, None, None]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    # =========================================================================
    # SUBSCRIPTIONS
    # =========================================================================

    def subscribe(self, callback: SnapshotCallback) -> Callable[[], None]:
        """
        Register a snapshot callback.

        The callback receives the current snapshot immediately and a fresh
        complete snapshot after every subsequent write.

        Returns:
            Callable that removes the subscription
        """
        with self._lock:
            token = next(self._tokens)
            self._subscribers[token] = callback

        logger.debug(f"Snapshot subscriber #{token} registered")
        self._deliver(callback, self.snapshot())

        def unsubscribe() -> None:
            with self._lock:
                self._subscribers.pop(token, None)
            logger.debug(f"Snapshot subscriber #{token} removed")

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def _publish(self) -> None:
        with self._lock:
            callbacks = list(self._subscribers.values())
        if not callbacks:
            return

        snapshot = self.snapshot()
        for callback in callbacks:
            self._deliver(callback, snapshot)

    @staticmethod
    def _deliver(callback: SnapshotCallback, snapshot: Snapshot) -> None:
        # Each subscriber gets its own copy
        try:
            callback({key: dict(doc) for key, doc in snapshot.items()})
        except Exception:
            logger.exception("Snapshot subscriber failed")

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def push_key(self) -> str:
        """Allocate a new document key without writing anything."""
        return self._keys.generate()

    def get(self, key: str) -> Optional[Document]:
        """Get a single document, or None when the key is absent."""
        with self._session_scope() as session:
            row = session.get(ProductDocument, key)
            return row.to_document() if row is not None else None

    def snapshot(self) -> Snapshot:
        """Get the complete collection ordered by key."""
        with self._session_scope() as session:
            rows = session.query(ProductDocument).order_by(ProductDocument.id).all()
            return {row.id: row.to_document() for row in rows}

    # =========================================================================
    # WRITE OPERATIONS
    # =========================================================================

    def set(self, key: str, record: Mapping[str, Any]) -> None:
        """
        Replace the whole document at key.

        Fields not present in record become absent.
        """
        fields = self._validate(record)

        with self._session_scope() as session:
            row = session.get(ProductDocument, key)
            if row is None:
                row = ProductDocument(id=key)
                session.add(row)
            row.clear()
            row.apply(fields)

        logger.debug(f"Document set: products/{key}")
        self._publish()

    def update(self, key: str, fields: Mapping[str, Any]) -> None:
        """
        Merge fields into the document at key.

        A None value clears that field. Updating a missing key creates the
        document with just the given fields.
        """
        changes = self._validate(fields)
        if not changes:
            return

        with self._session_scope() as session:
            row = session.get(ProductDocument, key)
            if row is None:
                row = ProductDocument(id=key)
                session.add(row)
            row.apply(changes)

        logger.debug(f"Document updated: products/{key} fields={sorted(changes)}")
        self._publish()

    def remove(self, key: str) -> None:
        """Delete the document at key. Missing keys are ignored."""
        with self._session_scope() as session:
            deleted = session.query(ProductDocument).filter(
                ProductDocument.id == key
            ).delete(synchronize_session=False)

        if deleted:
            logger.debug(f"Document removed: products/{key}")
            self._publish()

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def _validate(self, fields: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Check a record is flat and uses known fields.

        Raises:
            ValueError: On unknown fields or non-scalar values
        """
        unknown = set(fields) - self.ALLOWED_FIELDS
        if unknown:
            raise ValueError(f"Unknown document fields: {', '.join(sorted(unknown))}")

        for field, value in fields.items():
            if value is None:
                continue
            if field == "inStock":
                if not isinstance(value, bool):
                    raise ValueError("inStock must be a boolean")
            elif not isinstance(value, str):
                raise ValueError(f"{field} must be a string")

        return dict(fields)
