"""
==============================================================================
Health Check Endpoints
==============================================================================

System health status endpoints for monitoring and orchestration.

==============================================================================
"""

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.catalog.catalog import get_catalog
from app.store import get_document_store
from app.store.document_store import DocumentStore


router = APIRouter(prefix="/health", tags=["Health"])


class HealthController:
    """Controller for health check operations."""

    def __init__(self, store: DocumentStore):
        self._store = store

    def check_store(self) -> str:
        """Check document store connectivity."""
        try:
            self._store.snapshot()
            return "healthy"
        except SQLAlchemyError:
            return "unhealthy"

    def check_catalog(self) -> dict:
        """Check catalog status."""
        catalog = get_catalog()
        if catalog and catalog.is_loaded:
            return {"status": "healthy", "products": len(catalog.products)}
        return {"status": "not_loaded", "products": 0}

    def get_health(self) -> dict:
        """Get full health status."""
        store_status = self.check_store()
        catalog_info = self.check_catalog()

        overall = "healthy" if store_status == "healthy" else "degraded"

        return {
            "status": overall,
            "components": {
                "api": "healthy",
                "document_store": store_status,
                "catalog": catalog_info["status"]
            },
            "details": {
                "products_loaded": catalog_info["products"],
                "subscribers": self._store.subscriber_count
            }
        }


@router.get("")
async def health_check(store: DocumentStore = Depends(get_document_store)):
    """
    Health check endpoint.

    Returns system status including API, document store, and catalog.
    """
    controller = HealthController(store)
    return controller.get_health()


@router.get("/ready")
async def readiness_check():
    """Readiness probe for container orchestration."""
    catalog = get_catalog()
    return {"ready": bool(catalog and catalog.is_loaded)}


@router.get("/live")
async def liveness_check():
    """Liveness probe for container orchestration."""
    return {"alive": True}
