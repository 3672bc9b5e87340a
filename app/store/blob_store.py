"""
==============================================================================
Blob Store Module
==============================================================================

Filesystem-backed binary object store for product images.

Objects are addressed by slash-separated keys (e.g. "products/<id>") and
stored under a root directory. Each object has a small JSON sidecar with its
content type and SHA-256 digest. Retrieval URLs embed a digest token, so
uploading new bytes under the same key yields a new URL.

Layout:
-------
    <root>/products/<id>            object bytes
    <root>/products/<id>.meta.json  {"content_type": ..., "digest": ..., "size": ...}

==============================================================================
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


# Module logger
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlobMetadata:
    """Stored object description."""

    key: str
    content_type: str
    digest: str
    size: int


class BlobStore:
    """
    Key-addressed file store returning retrieval URLs.

    Example:
        >>> blobs = BlobStore(Path("storage/blobs"), "/media")
        >>> blobs.upload_bytes("products/abc", b"...", "image/png")
        >>> blobs.get_download_url("products/abc")
        '/media/products/abc?token=3f2a9c...'
    """

    KEY_PATTERN = re.compile(r"^[A-Za-z0-9_-]+(?:/[A-Za-z0-9_-]+)*$")
    META_SUFFIX = ".meta.json"
    DEFAULT_CONTENT_TYPE = "application/octet-stream"
    TOKEN_LENGTH = 16

    def __init__(self, root: Path, url_prefix: str = "/media") -> None:
        self._root = Path(root)
        self._url_prefix = "/" + url_prefix.strip("/")
        self._root.mkdir(parents=True, exist_ok=True)

    # =========================================================================
    # PATHS
    # =========================================================================

    def _object_path(self, key: str) -> Path:
        if not self.KEY_PATTERN.match(key or ""):
            raise ValueError(f"Invalid blob key: {key!r}")
        return self._root.joinpath(*key.split("/"))

    def _meta_path(self, key: str) -> Path:
        path = self._object_path(key)
        return path.with_name(path.name + self.META_SUFFIX)

    @staticmethod
    def _write_atomic(path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as tmp:
                tmp.write(data)
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    # =========================================================================
    # OPERATIONS
    # =========================================================================

    def upload_bytes(
        self,
        key: str,
        data: bytes,
        content_type: Optional[str] = None
    ) -> BlobMetadata:
        """
        Store bytes under key, replacing any previous object.

        Raises:
            ValueError: On an invalid key
            OSError: When the filesystem write fails
        """
        metadata = BlobMetadata(
            key=key,
            content_type=content_type or self.DEFAULT_CONTENT_TYPE,
            digest=hashlib.sha256(data).hexdigest(),
            size=len(data),
        )

        self._write_atomic(self._object_path(key), data)
        self._write_atomic(
            self._meta_path(key),
            json.dumps({
                "content_type": metadata.content_type,
                "digest": metadata.digest,
                "size": metadata.size,
            }).encode("utf-8"),
        )

        logger.info(f"Stored blob {key} ({metadata.size} bytes, {metadata.content_type})")
        return metadata

    def get_metadata(self, key: str) -> Optional[BlobMetadata]:
        """Get stored object metadata, or None when the key is absent."""
        meta_path = self._meta_path(key)
        if not self._object_path(key).is_file() or not meta_path.is_file():
            return None

        raw = json.loads(meta_path.read_text(encoding="utf-8"))
        return BlobMetadata(
            key=key,
            content_type=raw.get("content_type", self.DEFAULT_CONTENT_TYPE),
            digest=raw["digest"],
            size=int(raw.get("size", 0)),
        )

    def get_download_url(self, key: str) -> str:
        """
        Build the retrieval URL of a stored object.

        Raises:
            FileNotFoundError: When no object exists under key
        """
        metadata = self.get_metadata(key)
        if metadata is None:
            raise FileNotFoundError(f"No blob stored under {key}")
        return f"{self._url_prefix}/{key}?token={metadata.digest[:self.TOKEN_LENGTH]}"

    def resolve_path(self, key: str) -> Optional[Path]:
        """Filesystem path of a stored object, or None when absent."""
        try:
            path = self._object_path(key)
        except ValueError:
            return None
        return path if path.is_file() else None
