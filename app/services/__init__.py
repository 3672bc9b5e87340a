"""
==============================================================================
Services Package - Business Logic Layer
==============================================================================

Service classes implementing business logic.

This package provides:
- AuthService: Admin login and token management
- ProductAdminService: Product CRUD and stock toggling
- FavoritesService: Per-client favorites

Architecture Pattern: Service Layer
----------------------------------
    ┌─────────────────┐
    │   API Router    │
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │    Service      │  ← Business Logic
    └────────┬────────┘
             │
    ┌────────▼────────┐
    │     Stores      │  ← Documents / images / client storage
    └─────────────────┘

Usage:
------
    from app.services import ProductAdminService

    service = ProductAdminService(store, blobs)
    product = service.create_product(form)

==============================================================================
"""

from .auth_service import AuthService
from .favorites_service import FavoritesService
from .product_admin_service import ProductAdminService

__all__ = [
    "AuthService",
    "FavoritesService",
    "ProductAdminService",
]
