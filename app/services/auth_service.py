"""
==============================================================================
Authentication Service Module
==============================================================================

Authentication for the single catalog administrator.

This module implements:
- AuthService: Admin login and token refresh
- The admin password from settings is bcrypt-hashed once per process and
  verified through the SecurityManager

Authentication Flow:
-------------------
    ┌─────────────┐
    │   Login     │
    │  Request    │
    └──────┬──────┘
           │
    ┌──────▼──────┐     ┌─────────────┐
    │  Username   │────▶│  Mismatch   │ → INVALID_CREDENTIALS
    └──────┬──────┘     └─────────────┘
           │
    ┌──────▼──────┐     ┌─────────────┐
    │  Verify     │────▶│  Password   │ → INVALID_CREDENTIALS
    │  Password   │     │   Wrong     │
    └──────┬──────┘     └─────────────┘
           │
    ┌──────▼──────┐
    │  Generate   │
    │   Tokens    │
    └─────────────┘

==============================================================================
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional, Tuple

from app.config import Settings, get_settings
from app.core import exceptions
from app.core.security import SecurityManager, get_security_manager
from app.schemas.auth import AdminInfo


# Module logger
logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


@lru_cache(maxsize=4)
def _hashed_admin_password(password: str) -> str:
    return get_security_manager().hash_password(password)


class AuthService:
    """
    Authentication service for the catalog administrator.

    Example:
        >>> auth_service = AuthService()
        >>> admin, access, refresh = auth_service.authenticate("admin", "admin123")
        >>> admin, access, refresh = auth_service.refresh_tokens(refresh)
    """

    def __init__(
        self,
        security: Optional[SecurityManager] = None,
        settings: Optional[Settings] = None
    ) -> None:
        self._security = security or get_security_manager()
        self._settings = settings or get_settings()

    # =========================================================================
    # AUTHENTICATION METHODS
    # =========================================================================

    def authenticate(self, username: str, password: str) -> Tuple[AdminInfo, str, str]:
        """
        Authenticate the administrator.

        Args:
            username: Login name (case-insensitive)
            password: Plain text password

        Returns:
            Tuple of (AdminInfo, access_token, refresh_token)

        Raises:
            AppException: INVALID_CREDENTIALS on any mismatch
        """
        username = username.lower().strip()
        expected = self._settings.admin_username.lower()

        if username != expected:
            logger.warning(f"Login failed: unknown user {username!r}")
            raise exceptions.invalid_credentials()

        hashed = _hashed_admin_password(self._settings.admin_password)
        if not self._security.verify_password(password, hashed):
            logger.warning(f"Login failed: wrong password for {username!r}")
            raise exceptions.invalid_credentials()

        logger.info(f"✅ Admin logged in: {username}")
        return self._issue_tokens(username)

    def refresh_tokens(self, refresh_token: str) -> Tuple[AdminInfo, str, str]:
        """
        Exchange a refresh token for a new token pair.

        Raises:
            AppException: TOKEN_EXPIRED / TOKEN_INVALID
        """
        payload = self._security.verify_token(
            refresh_token, SecurityManager.TOKEN_TYPE_REFRESH
        )
        if not payload:
            raise exceptions.token_expired()

        username = payload.get("sub")
        if payload.get("role") != ADMIN_ROLE or username != self._settings.admin_username.lower():
            raise exceptions.token_invalid()

        return self._issue_tokens(username)

    def _issue_tokens(self, username: str) -> Tuple[AdminInfo, str, str]:
        claims = {"sub": username, "role": ADMIN_ROLE}
        return (
            AdminInfo(username=username, role=ADMIN_ROLE),
            self._security.create_access_token(claims),
            self._security.create_refresh_token(claims),
        )

    def get_token_expiry_seconds(self) -> int:
        """Access token lifetime in seconds."""
        return self._security.get_access_token_expire_seconds()
