"""
Application Exception Handling

Single AppException class for all application errors with FastAPI integration.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Product not found", "PRODUCT_NOT_FOUND", 404)
        raise AppException("Please fill all required fields", "VALIDATION_ERROR", 422,
                           {"missing": ["name"]})

    Error Codes:
        Authentication:
            - INVALID_CREDENTIALS (401)
            - TOKEN_EXPIRED (401)
            - TOKEN_INVALID (401)

        Authorization:
            - ADMIN_REQUIRED (403)

        Products:
            - PRODUCT_NOT_FOUND (404)
            - CONFIRMATION_REQUIRED (400)
            - IMAGE_NOT_FOUND (404)

        Backends:
            - STORE_UNAVAILABLE (503)
            - BLOB_STORE_UNAVAILABLE (503)

        General:
            - VALIDATION_ERROR (422)
            - CATALOG_NOT_LOADED (500)
    """

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code (default: 400)
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict = {
            "success": False,
            "error": {
                "code": self.code,
                "message": self.message,
                "timestamp": self.timestamp
            }
        }

        if self.details:
            error_dict["error"]["details"] = self.details

        return error_dict


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def invalid_credentials() -> AppException:
    """Create invalid credentials exception."""
    return AppException("Invalid username or password", "INVALID_CREDENTIALS", 401)


def token_expired() -> AppException:
    """Create token expired exception."""
    return AppException("Token has expired", "TOKEN_EXPIRED", 401)


def token_invalid() -> AppException:
    """Create invalid token exception."""
    return AppException("Invalid or malformed token", "TOKEN_INVALID", 401)


def admin_required() -> AppException:
    """Create admin role required exception."""
    return AppException("Admin role required", "ADMIN_REQUIRED", 403)


def missing_required_fields(missing: List[str]) -> AppException:
    """Create required-field validation exception."""
    return AppException(
        "Please fill all required fields",
        "VALIDATION_ERROR",
        422,
        {"missing": missing}
    )


def product_not_found(product_id: Optional[str] = None) -> AppException:
    """Create product not found exception."""
    details = {"product_id": product_id} if product_id else {}
    return AppException("Product not found", "PRODUCT_NOT_FOUND", 404, details)


def confirmation_required(action: str) -> AppException:
    """Create missing confirmation exception."""
    return AppException(
        f"Please confirm before you {action}",
        "CONFIRMATION_REQUIRED",
        400,
        {"action": action}
    )


def store_unavailable(operation: str) -> AppException:
    """Create document store failure exception."""
    return AppException(
        f"Could not {operation}, please try again",
        "STORE_UNAVAILABLE",
        503,
        {"operation": operation}
    )


def blob_store_unavailable(key: str) -> AppException:
    """Create image store failure exception."""
    return AppException(
        "Could not upload the product image, please try again",
        "BLOB_STORE_UNAVAILABLE",
        503,
        {"key": key}
    )


def catalog_not_loaded() -> AppException:
    """Create catalog not loaded exception."""
    return AppException(
        "Product catalog not loaded",
        "CATALOG_NOT_LOADED",
        500
    )


def image_not_found(key: str) -> AppException:
    """Create missing image exception."""
    return AppException("Image not found", "IMAGE_NOT_FOUND", 404, {"key": key})
