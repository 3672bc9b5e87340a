"""
==============================================================================
Authentication Endpoints
==============================================================================

Admin login and token refresh.

==============================================================================
"""

from fastapi import APIRouter, Depends

from app.core.dependencies import require_admin
from app.services.auth_service import AuthService
from app.schemas.auth import (
    AdminInfo,
    CurrentAdminResponse,
    LoginRequest,
    RefreshRequest,
    TokenResponse,
)


router = APIRouter(prefix="/auth", tags=["Authentication"])


class AuthController:
    """Controller for authentication operations."""

    def __init__(self):
        self._service = AuthService()

    def login(self, request: LoginRequest) -> TokenResponse:
        """Authenticate the admin and generate tokens."""
        admin, access_token, refresh_token = self._service.authenticate(
            request.username,
            request.password
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._service.get_token_expiry_seconds(),
            user=admin
        )

    def refresh(self, request: RefreshRequest) -> TokenResponse:
        """Refresh tokens."""
        admin, access_token, refresh_token = self._service.refresh_tokens(
            request.refresh_token
        )

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self._service.get_token_expiry_seconds(),
            user=admin
        )


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """Authenticate the admin and get tokens."""
    controller = AuthController()
    return controller.login(request)


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(request: RefreshRequest):
    """Refresh access token using refresh token."""
    controller = AuthController()
    return controller.refresh(request)


@router.get("/me", response_model=CurrentAdminResponse)
async def get_current_admin_info(admin: AdminInfo = Depends(require_admin)):
    """Get the authenticated admin."""
    return CurrentAdminResponse(user=admin)
