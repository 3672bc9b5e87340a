"""
==============================================================================
Favorites Endpoints
==============================================================================

Per-client favorites, identified by the X-Client-Id header.

==============================================================================
"""

from fastapi import APIRouter, Depends

from app.core.dependencies import get_client_id, get_favorites_service
from app.schemas.common import MessageResponse
from app.services.favorites_service import FavoritesService


router = APIRouter(prefix="/favorites", tags=["Favorites"])


@router.get("")
async def get_favorites(
    client_id: str = Depends(get_client_id),
    service: FavoritesService = Depends(get_favorites_service)
):
    """Get the favorite product ids of the calling client."""
    favorites = service.get(client_id)
    return {
        "success": True,
        "total": len(favorites),
        "favorites": favorites
    }


@router.post("/{product_id}/toggle")
async def toggle_favorite(
    product_id: str,
    client_id: str = Depends(get_client_id),
    service: FavoritesService = Depends(get_favorites_service)
):
    """Add or remove a product from the client's favorites."""
    favorites, is_favorite = service.toggle(client_id, product_id)
    return {
        "success": True,
        "product_id": product_id,
        "is_favorite": is_favorite,
        "favorites": favorites
    }


@router.delete("", response_model=MessageResponse)
async def clear_favorites(
    client_id: str = Depends(get_client_id),
    service: FavoritesService = Depends(get_favorites_service)
):
    """Remove every favorite of the client."""
    service.clear(client_id)
    return MessageResponse(message="Favorites cleared")
