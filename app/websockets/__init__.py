"""
==============================================================================
WebSocket Package
==============================================================================

Real-time WebSocket handlers.

Handlers:
---------
- products: Live product collection snapshots

==============================================================================
"""

from .products import router as products_router

__all__ = ["products_router"]
