"""
==============================================================================
Product Catalog Endpoints
==============================================================================

Endpoints for browsing, filtering and pricing the public catalog.

Favorites-aware endpoints read the caller's favorites when an X-Client-Id
header is sent; without it no product is a favorite.

==============================================================================
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.catalog.catalog import ProductCatalog
from app.catalog.models import CatalogQuery, ProductResponse, SortOption, StockFilter
from app.catalog.pricing import calculate_price
from app.config import get_settings
from app.core import exceptions
from app.core.dependencies import (
    get_client_id_optional,
    get_favorites_service,
    get_product_catalog,
)
from app.schemas.catalog import PriceEstimateRequest
from app.services.favorites_service import FavoritesService


router = APIRouter(prefix="/catalog", tags=["Catalog"])


class CatalogController:
    """Controller for catalog browsing operations."""

    def __init__(self, catalog: ProductCatalog, favorites: List[str]):
        self._catalog = catalog
        self._favorites = favorites

    def list_products(self, query: CatalogQuery) -> dict:
        """Run a catalog query and render the visible products."""
        products = self._catalog.query(query, self._favorites)
        favorite_ids = set(self._favorites)

        return {
            "success": True,
            "total": len(products),
            "query": query.model_dump(mode="json"),
            "products": [
                ProductResponse.from_product(p, p.id in favorite_ids).model_dump(by_alias=True)
                for p in products
            ]
        }

    def get_product(self, product_id: str) -> dict:
        """Get one product by id."""
        product = self._catalog.find_by_id(product_id)
        if not product:
            raise exceptions.product_not_found(product_id)

        return {
            "success": True,
            "product": ProductResponse.from_product(
                product, product_id in self._favorites
            ).model_dump(by_alias=True)
        }

    def get_categories(self) -> dict:
        """Distinct categories in first-seen order."""
        return {
            "success": True,
            "categories": self._catalog.categories()
        }

    def get_weight_range(self) -> dict:
        """Integer weight bounds of the whole collection."""
        bounds = self._catalog.weight_bounds()
        return {
            "success": True,
            "min": bounds.min,
            "max": bounds.max
        }

    def get_stats(self) -> dict:
        """Get catalog statistics."""
        return {
            "success": True,
            "stats": self._catalog.get_stats()
        }


class PriceController:
    """Controller for price estimates."""

    def __init__(self):
        self._settings = get_settings()

    def estimate(
        self,
        weight: Optional[str],
        gold_rate: Optional[float],
        making_charge: Optional[float],
        purity: Optional[float]
    ) -> dict:
        """Estimate a price, filling unset inputs from configuration."""
        estimate = calculate_price(
            weight,
            gold_rate if gold_rate is not None else self._settings.default_gold_rate,
            making_charge if making_charge is not None else self._settings.default_making_charge,
            purity if purity is not None else self._settings.default_purity
        )
        return {
            "success": True,
            "estimate": estimate.to_display()
        }


def _favorites_for(client_id: Optional[str], service: FavoritesService) -> List[str]:
    return service.get(client_id) if client_id else []


@router.get("/products")
async def list_products(
    search: str = Query("", max_length=200, description="Case-insensitive name/description substring"),
    category: Optional[str] = Query(None, description="Exact category; empty means all"),
    stock: StockFilter = Query(StockFilter.ALL),
    weight_min: Optional[float] = Query(None, description="Inclusive lower weight"),
    weight_max: Optional[float] = Query(None, description="Inclusive upper weight"),
    favorites_only: bool = Query(False),
    sort: SortOption = Query(SortOption.FEATURED),
    catalog: ProductCatalog = Depends(get_product_catalog),
    client_id: Optional[str] = Depends(get_client_id_optional),
    favorites: FavoritesService = Depends(get_favorites_service)
):
    """List the visible products for a filter and sort configuration."""
    query = CatalogQuery(
        search=search,
        category=category or None,
        stock=stock,
        weight_min=weight_min,
        weight_max=weight_max,
        favorites_only=favorites_only,
        sort=sort
    )
    controller = CatalogController(catalog, _favorites_for(client_id, favorites))
    return controller.list_products(query)


@router.get("/categories")
async def get_categories(catalog: ProductCatalog = Depends(get_product_catalog)):
    """Get all distinct product categories."""
    controller = CatalogController(catalog, [])
    return controller.get_categories()


@router.get("/weight-range")
async def get_weight_range(catalog: ProductCatalog = Depends(get_product_catalog)):
    """Get weight range slider bounds."""
    controller = CatalogController(catalog, [])
    return controller.get_weight_range()


@router.get("/stats")
async def get_catalog_stats(catalog: ProductCatalog = Depends(get_product_catalog)):
    """Get catalog statistics."""
    controller = CatalogController(catalog, [])
    return controller.get_stats()


@router.get("/products/{product_id}")
async def get_product(
    product_id: str,
    catalog: ProductCatalog = Depends(get_product_catalog),
    client_id: Optional[str] = Depends(get_client_id_optional),
    favorites: FavoritesService = Depends(get_favorites_service)
):
    """Get product details."""
    controller = CatalogController(catalog, _favorites_for(client_id, favorites))
    return controller.get_product(product_id)


@router.get("/products/{product_id}/estimate")
async def estimate_product_price(
    product_id: str,
    gold_rate: Optional[float] = Query(None, ge=0),
    making_charge: Optional[float] = Query(None, ge=0),
    purity: Optional[float] = Query(None, gt=0, le=24),
    catalog: ProductCatalog = Depends(get_product_catalog)
):
    """Estimate the price of a catalog product."""
    product = catalog.find_by_id(product_id)
    if not product:
        raise exceptions.product_not_found(product_id)

    controller = PriceController()
    response = controller.estimate(product.weight, gold_rate, making_charge, purity)
    response["product_id"] = product_id
    return response


@router.post("/estimate")
async def estimate_price(request: PriceEstimateRequest):
    """Estimate the price of an arbitrary weight."""
    controller = PriceController()
    return controller.estimate(
        request.weight,
        request.gold_rate,
        request.making_charge,
        request.purity
    )
