"""
==============================================================================
Favorites Service Module
==============================================================================

Per-client favorite products, persisted in client-local storage.

The favorites of a client are an ordered list of product ids stored as a
JSON array under one named local storage entry. The in-memory copy is
authoritative for the life of the process: persistence failures are
logged and otherwise ignored.

==============================================================================
"""

from __future__ import annotations

import json
import logging
import threading
from typing import Dict, List, Tuple

from app.store.local_storage import LocalStorage


# Module logger
logger = logging.getLogger(__name__)


class FavoritesService:
    """
    Favorites set per client.

    Example:
        >>> favorites = FavoritesService(LocalStorage(path), "goldShopFavorites")
        >>> favorites.toggle("browser-1", "p1")
        (['p1'], True)
        >>> favorites.toggle("browser-1", "p1")
        ([], False)
    """

    def __init__(self, storage: LocalStorage, key: str = "goldShopFavorites") -> None:
        self._storage = storage
        self._key = key
        self._cache: Dict[str, List[str]] = {}
        self._lock = threading.Lock()

    # =========================================================================
    # PERSISTENCE
    # =========================================================================

    def _load(self, client_id: str) -> List[str]:
        try:
            raw = self._storage.get_item(client_id, self._key)
        except (OSError, ValueError) as e:
            logger.warning(f"Could not load favorites for {client_id}: {e}")
            return []

        if raw is None:
            return []

        try:
            ids = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Error loading favorites for {client_id}: {e}")
            return []

        if not isinstance(ids, list):
            logger.warning(f"Ignoring malformed favorites for {client_id}")
            return []

        # Keep first occurrence order, drop non-string entries
        seen: Dict[str, None] = {}
        for product_id in ids:
            if isinstance(product_id, str):
                seen.setdefault(product_id, None)
        return list(seen)

    def _persist(self, client_id: str, ids: List[str]) -> None:
        try:
            self._storage.set_item(client_id, self._key, json.dumps(ids))
        except (OSError, ValueError) as e:
            logger.warning(f"Could not persist favorites for {client_id}: {e}")

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def get(self, client_id: str) -> List[str]:
        """Favorite product ids of a client, in the order they were added."""
        with self._lock:
            return list(self._current(client_id))

    def _current(self, client_id: str) -> List[str]:
        # Caller holds self._lock
        if client_id not in self._cache:
            self._cache[client_id] = self._load(client_id)
        return self._cache[client_id]

    def is_favorite(self, client_id: str, product_id: str) -> bool:
        return product_id in self.get(client_id)

    def toggle(self, client_id: str, product_id: str) -> Tuple[List[str], bool]:
        """
        Add or remove a product from a client's favorites.

        Returns:
            Tuple of (updated favorites, whether product_id is now a favorite)
        """
        with self._lock:
            current = self._current(client_id)

            if product_id in current:
                updated = [favorite for favorite in current if favorite != product_id]
                is_favorite = False
            else:
                updated = current + [product_id]
                is_favorite = True

            self._cache[client_id] = updated
            self._persist(client_id, updated)

        logger.debug(f"Favorites of {client_id}: {product_id} → {is_favorite}")
        return list(updated), is_favorite

    def clear(self, client_id: str) -> None:
        """Remove every favorite of a client."""
        with self._lock:
            self._cache[client_id] = []
            try:
                self._storage.remove_item(client_id, self._key)
            except (OSError, ValueError) as e:
                logger.warning(f"Could not clear favorites for {client_id}: {e}")
