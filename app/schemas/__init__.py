"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

This package provides:
- Common: Shared response schemas
- Auth: Admin authentication schemas
- Product: Admin product form and image upload
- Catalog: Public catalog request schemas

==============================================================================
"""

from .common import MessageResponse
from .auth import LoginRequest, TokenResponse, RefreshRequest, AdminInfo, CurrentAdminResponse
from .product import AdminMode, ImageUpload, ProductForm, ProductFormResponse, REQUIRED_FIELDS
from .catalog import PriceEstimateRequest

__all__ = [
    # Common
    "MessageResponse",
    # Auth
    "LoginRequest",
    "TokenResponse",
    "RefreshRequest",
    "AdminInfo",
    "CurrentAdminResponse",
    # Product
    "AdminMode",
    "ImageUpload",
    "ProductForm",
    "ProductFormResponse",
    "REQUIRED_FIELDS",
    # Catalog
    "PriceEstimateRequest",
]
