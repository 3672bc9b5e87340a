"""
==============================================================================
FastAPI Dependencies Module
==============================================================================

Dependency injection for stores, services and admin authentication.

This module implements:
- AuthenticationManager: Class-based admin token checks
- FastAPI dependencies for route protection
- Store and service providers (override points for tests)

Dependency Hierarchy:
--------------------
    ┌────────────────────┐   ┌────────────────┐   ┌───────────────────┐
    │get_document_store()│   │get_blob_store()│   │get_local_storage()│
    └─────────┬──────────┘   └───────┬────────┘   └─────────┬─────────┘
              │                      │                      │
    ┌─────────▼──────────────────────▼──┐       ┌───────────▼────────────┐
    │       get_admin_service()         │       │ get_favorites_service()│
    └───────────────────────────────────┘       └────────────────────────┘

    security_scheme ──▶ get_current_admin ──▶ require_admin

Usage Examples:
--------------
    @router.post("/admin/products")
    async def create(
        admin: AdminInfo = Depends(require_admin),
        service: ProductAdminService = Depends(get_admin_service),
    ):
        ...

==============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.catalog.catalog import ProductCatalog, get_catalog
from app.config import get_settings
from app.core import exceptions
from app.core.security import SecurityManager, get_security_manager
from app.schemas.auth import AdminInfo
from app.services.favorites_service import FavoritesService
from app.services.product_admin_service import ProductAdminService
from app.store import get_blob_store, get_document_store, get_local_storage
from app.store.blob_store import BlobStore
from app.store.document_store import DocumentStore
from app.store.local_storage import LocalStorage
from app.utils.validators import ClientIdValidator


# Module logger
logger = logging.getLogger(__name__)

# HTTP Bearer security scheme for Swagger UI
security_scheme = HTTPBearer(auto_error=False)


class AuthenticationManager:
    """
    Admin authentication from bearer tokens.

    Example:
        >>> auth = AuthenticationManager(security_manager)
        >>> admin = auth.get_current_admin(credentials)
    """

    ADMIN_ROLE = "admin"

    def __init__(self, security: SecurityManager) -> None:
        self._security = security

    def extract_token_from_header(
        self,
        credentials: Optional[HTTPAuthorizationCredentials]
    ) -> str:
        """
        Extract JWT token from HTTP Authorization header.

        Raises:
            AppException: If no credentials provided
        """
        if not credentials:
            logger.debug("No authorization credentials provided")
            raise exceptions.token_invalid()

        return credentials.credentials

    def authenticate_from_token(self, token: str) -> AdminInfo:
        """
        Verify an access token and return the admin it names.

        Raises:
            AppException: TOKEN_EXPIRED, TOKEN_INVALID or ADMIN_REQUIRED
        """
        payload = self._security.verify_token(token, SecurityManager.TOKEN_TYPE_ACCESS)

        if not payload:
            raise exceptions.token_expired()

        username = payload.get("sub")
        if not username:
            logger.warning("Token payload missing 'sub' claim")
            raise exceptions.token_invalid()

        if payload.get("role") != self.ADMIN_ROLE:
            logger.warning(f"Non-admin token rejected for {username}")
            raise exceptions.admin_required()

        return AdminInfo(username=username, role=self.ADMIN_ROLE)

    def get_current_admin(
        self,
        credentials: Optional[HTTPAuthorizationCredentials]
    ) -> AdminInfo:
        token = self.extract_token_from_header(credentials)
        return self.authenticate_from_token(token)


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================

async def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme)
) -> AdminInfo:
    """
    FastAPI dependency requiring an admin access token.

    Usage:
        @router.delete("/admin/products/{product_id}")
        async def delete(product_id: str, admin: AdminInfo = Depends(require_admin)):
            ...
    """
    auth_manager = AuthenticationManager(get_security_manager())
    return auth_manager.get_current_admin(credentials)


# =============================================================================
# CATALOG AND SERVICE DEPENDENCIES
# =============================================================================

def get_product_catalog() -> ProductCatalog:
    """
    FastAPI dependency returning the live catalog.

    Raises:
        AppException: CATALOG_NOT_LOADED before startup subscribed it
    """
    catalog = get_catalog()
    if catalog is None or not catalog.is_loaded:
        raise exceptions.catalog_not_loaded()
    return catalog


def get_admin_service(
    store: DocumentStore = Depends(get_document_store),
    blobs: BlobStore = Depends(get_blob_store)
) -> ProductAdminService:
    """FastAPI dependency building the admin service."""
    return ProductAdminService(store, blobs)


@lru_cache(maxsize=1)
def _favorites_service(storage: LocalStorage, key: str) -> FavoritesService:
    return FavoritesService(storage, key)


def get_favorites_service(
    storage: LocalStorage = Depends(get_local_storage)
) -> FavoritesService:
    """FastAPI dependency returning the process-wide favorites service."""
    return _favorites_service(storage, get_settings().favorites_key)


# =============================================================================
# CLIENT IDENTIFICATION
# =============================================================================

def get_client_id_optional(
    x_client_id: Optional[str] = Header(default=None, alias="X-Client-Id")
) -> Optional[str]:
    """
    Client id from the X-Client-Id header, if any.

    Raises:
        AppException: VALIDATION_ERROR for a malformed id
    """
    if x_client_id is None:
        return None

    is_valid, error = ClientIdValidator().validate(x_client_id)
    if not is_valid:
        raise exceptions.AppException(error, "VALIDATION_ERROR", 422, {"header": "X-Client-Id"})
    return x_client_id


def get_client_id(
    client_id: Optional[str] = Depends(get_client_id_optional)
) -> str:
    """Client id from the X-Client-Id header; required."""
    if client_id is None:
        raise exceptions.AppException(
            "Client id is required", "VALIDATION_ERROR", 422, {"header": "X-Client-Id"}
        )
    return client_id
