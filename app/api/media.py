"""
==============================================================================
Media Endpoint
==============================================================================

Serves product images from the image store at the retrieval URLs it
hands out ({media_url_prefix}/{key}?token=...).

==============================================================================
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse

from app.config import get_settings
from app.core import exceptions
from app.store import get_blob_store
from app.store.blob_store import BlobStore


router = APIRouter(prefix=get_settings().media_url_prefix, tags=["Media"])


@router.get("/{key:path}")
async def get_media(
    key: str,
    token: Optional[str] = Query(None),
    blobs: BlobStore = Depends(get_blob_store)
):
    """Download a stored image. A token, when given, must match the stored object."""
    try:
        metadata = blobs.get_metadata(key)
    except ValueError:
        raise exceptions.image_not_found(key)

    path = blobs.resolve_path(key)
    if metadata is None or path is None:
        raise exceptions.image_not_found(key)

    if token is not None and not metadata.digest.startswith(token):
        raise exceptions.image_not_found(key)

    return FileResponse(path, media_type=metadata.content_type)
