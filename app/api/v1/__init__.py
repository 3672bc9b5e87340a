"""
==============================================================================
API v1 Endpoints
==============================================================================

Version 1 of the REST API.

Routers:
--------
- health: Health check endpoints
- auth: Admin authentication endpoints
- catalog: Public catalog browsing and price estimates
- favorites: Per-client favorites
- admin_products: Product management (admin)

==============================================================================
"""

from . import health, auth, catalog, favorites, admin_products

__all__ = ["health", "auth", "catalog", "favorites", "admin_products"]
