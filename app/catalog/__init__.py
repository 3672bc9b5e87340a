"""
==============================================================================
Catalog Package - Product Browsing
==============================================================================

Catalog query engine, price estimator and view state.

Classes:
--------
- Product: Pydantic model for products
- CatalogQuery: Filter and sort configuration
- ProductCatalog: Snapshot-fed catalog with search and facets
- PriceEstimate: Gold price breakdown
- ViewState: Catalog panel state value object

==============================================================================
"""

from .models import (
    CatalogQuery,
    Product,
    ProductResponse,
    SortOption,
    StockFilter,
    WeightBounds,
)
from .catalog import (
    ProductCatalog,
    apply_query,
    compute_weight_bounds,
    distinct_categories,
    filter_products,
    get_catalog,
    init_catalog,
    shutdown_catalog,
    sort_products,
)
from .pricing import PriceEstimate, calculate_price
from .view_state import ViewMode, ViewState

__all__ = [
    "CatalogQuery",
    "Product",
    "ProductResponse",
    "SortOption",
    "StockFilter",
    "WeightBounds",
    "ProductCatalog",
    "apply_query",
    "compute_weight_bounds",
    "distinct_categories",
    "filter_products",
    "get_catalog",
    "init_catalog",
    "shutdown_catalog",
    "sort_products",
    "PriceEstimate",
    "calculate_price",
    "ViewMode",
    "ViewState",
]
