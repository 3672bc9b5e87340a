"""
==============================================================================
Client Local Storage Module
==============================================================================

Per-client named string entries persisted on disk.

Each client gets one JSON file holding a flat {entry name: string value}
object, the same shape as a browser's localStorage. Values are opaque
strings; callers serialize structured data themselves.

==============================================================================
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from app.utils.validators import ClientIdValidator


# Module logger
logger = logging.getLogger(__name__)


class LocalStorage:
    """
    File-per-client key-value storage.

    Raises OSError on filesystem failures and ValueError on unreadable
    files or invalid client ids; callers decide whether to tolerate them.

    Example:
        >>> storage = LocalStorage(Path("storage/clients"))
        >>> storage.set_item("browser-1", "goldShopFavorites", '["a", "b"]')
        >>> storage.get_item("browser-1", "goldShopFavorites")
        '["a", "b"]'
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)
        self._validator = ClientIdValidator()

    def _path(self, client_id: str) -> Path:
        is_valid, error = self._validator.validate(client_id)
        if not is_valid:
            raise ValueError(error)
        return self._directory / f"{client_id}.json"

    def _read(self, client_id: str) -> Dict[str, str]:
        path = self._path(client_id)
        if not path.is_file():
            return {}

        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Corrupt local storage file for client {client_id}")
        return data

    def _write(self, client_id: str, data: Dict[str, str]) -> None:
        path = self._path(client_id)
        path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as tmp:
                json.dump(data, tmp)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def get_item(self, client_id: str, name: str) -> Optional[str]:
        """Get an entry, or None when it was never set."""
        return self._read(client_id).get(name)

    def set_item(self, client_id: str, name: str, value: str) -> None:
        """Create or overwrite an entry."""
        data = self._read(client_id)
        data[name] = value
        self._write(client_id, data)

    def remove_item(self, client_id: str, name: str) -> None:
        """Delete an entry. Missing entries are ignored."""
        data = self._read(client_id)
        if data.pop(name, None) is not None:
            self._write(client_id, data)
