"""
==============================================================================
Product Catalog Module
==============================================================================

Catalog query engine over the live product collection.

Features:
---------
- Holds the latest complete snapshot pushed by the document store
- Search, category, stock, weight-range and favorites filters (AND)
- Stable sorting by weight or locale-aware name
- Derived facets: categories and weight range bounds

The filter and sort functions are pure; the catalog only swaps in a new
immutable snapshot whenever the store delivers one.

Snapshot Flow:
-------------
    DocumentStore ──(full snapshot)──▶ ProductCatalog.on_snapshot
                                            │
                                            ▼
                                 CatalogSnapshot (immutable)
                                   products / by_id / facets

==============================================================================
"""

from __future__ import annotations

import locale
import logging
import math
import threading
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Tuple

from app.utils.parsing import parse_measure_or_zero

from .models import CatalogQuery, Product, SortOption, StockFilter, WeightBounds


# Module logger
logger = logging.getLogger(__name__)

DEFAULT_WEIGHT_BOUNDS = WeightBounds(min=0, max=1000)


# =============================================================================
# FILTER PREDICATES
# =============================================================================

def matches_search(product: Product, search: str) -> bool:
    """Case-insensitive substring match on name or description."""
    term = search.lower()
    if not term:
        return True
    return term in (product.name or "").lower() or term in (product.description or "").lower()


def matches_category(product: Product, category: Optional[str]) -> bool:
    """Exact category match; empty category matches everything."""
    if not category:
        return True
    return product.category == category


def matches_stock(product: Product, stock: StockFilter) -> bool:
    """Out of stock means an explicit False; in stock is everything else."""
    if stock == StockFilter.IN_STOCK:
        return product.is_in_stock
    if stock == StockFilter.OUT_OF_STOCK:
        return product.is_out_of_stock
    return True


def matches_weight(
    product: Product,
    weight_min: Optional[float],
    weight_max: Optional[float]
) -> bool:
    """Inclusive range check; unparseable weights always match."""
    weight = product.parsed_weight
    if weight is None:
        return True
    if weight_min is not None and weight < weight_min:
        return False
    if weight_max is not None and weight > weight_max:
        return False
    return True


def filter_products(
    products: Iterable[Product],
    query: CatalogQuery,
    favorites: Iterable[str] = ()
) -> List[Product]:
    """
    Apply every active filter of query, keeping input order.

    Args:
        products: Products to filter
        query: Filter configuration
        favorites: Favorite product ids (used when favorites_only is set)

    Returns:
        Matching products
    """
    favorite_ids = set(favorites) if query.favorites_only else set()

    return [
        product for product in products
        if matches_search(product, query.search)
        and matches_category(product, query.category)
        and matches_stock(product, query.stock)
        and matches_weight(product, query.weight_min, query.weight_max)
        and (not query.favorites_only or product.id in favorite_ids)
    ]


# =============================================================================
# SORTING
# =============================================================================

def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def name_sort_key(name: Optional[str]) -> Tuple[str, str]:
    """
    Locale-aware collation key.

    Primary level ignores case and accents, secondary level falls back to
    the locale collation of the raw name.
    """
    name = name or ""
    return (
        locale.strxfrm(_strip_accents(name).casefold()),
        locale.strxfrm(name),
    )


def _weight_key(product: Product) -> float:
    return parse_measure_or_zero(product.weight)


def _name_key(product: Product) -> Tuple[str, str]:
    return name_sort_key(product.name)


_SORT_KEYS: Dict[SortOption, Tuple[Callable[[Product], Any], bool]] = {
    SortOption.WEIGHT_LOW_TO_HIGH: (_weight_key, False),
    SortOption.WEIGHT_HIGH_TO_LOW: (_weight_key, True),
    SortOption.NAME_AZ: (_name_key, False),
    SortOption.NAME_ZA: (_name_key, True),
}


def sort_products(products: Iterable[Product], sort: SortOption) -> List[Product]:
    """
    Stable sort; FEATURED keeps the input order.

    Unparseable weights sort as 0. Equal keys keep their input order in
    both directions.
    """
    items = list(products)
    if sort not in _SORT_KEYS:
        return items

    key, descending = _SORT_KEYS[sort]
    return sorted(items, key=key, reverse=descending)


def apply_query(
    products: Iterable[Product],
    query: CatalogQuery,
    favorites: Iterable[str] = ()
) -> List[Product]:
    """Filter then sort products for display."""
    return sort_products(filter_products(products, query, favorites), query.sort)


# =============================================================================
# FACETS
# =============================================================================

def distinct_categories(products: Iterable[Product]) -> List[str]:
    """Distinct non-empty categories in first-seen order."""
    seen: Dict[str, None] = {}
    for product in products:
        if product.category:
            seen.setdefault(product.category, None)
    return list(seen)


def compute_weight_bounds(
    products: Iterable[Product],
    default: WeightBounds = DEFAULT_WEIGHT_BOUNDS
) -> WeightBounds:
    """Floor of the lightest and ceiling of the heaviest parseable weight."""
    weights = [
        weight for weight in (product.parsed_weight for product in products)
        if weight is not None
    ]
    if not weights:
        return default
    return WeightBounds(min=math.floor(min(weights)), max=math.ceil(max(weights)))


# =============================================================================
# CATALOG
# =============================================================================

@dataclass(frozen=True)
class CatalogSnapshot:
    """Immutable view of one delivered collection with its facets."""

    version: int
    products: Tuple[Product, ...] = ()
    by_id: Dict[str, Product] = field(default_factory=dict)
    categories: Tuple[str, ...] = ()
    weight_bounds: WeightBounds = DEFAULT_WEIGHT_BOUNDS


class ProductCatalog:
    """
    Product catalog fed by document store snapshots.

    Every delivered snapshot replaces the held collection in one reference
    swap, so readers always see a complete, consistent collection.

    Example:
        >>> catalog = ProductCatalog()
        >>> catalog.on_snapshot({"k1": {"name": "Ring", "weight": "5g", "category": "Rings"}})
        >>> catalog.categories()
        ['Rings']
        >>> [p.name for p in catalog.query(CatalogQuery(search="ring"))]
        ['Ring']
    """

    def __init__(self, default_bounds: WeightBounds = DEFAULT_WEIGHT_BOUNDS) -> None:
        self._default_bounds = default_bounds
        self._snapshot = CatalogSnapshot(version=0, weight_bounds=default_bounds)
        self._lock = threading.Lock()
        self._loaded = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    # =========================================================================
    # PROPERTIES
    # =========================================================================

    @property
    def products(self) -> List[Product]:
        """Get all products in collection order."""
        return list(self._snapshot.products)

    @property
    def version(self) -> int:
        """Number of snapshots received so far."""
        return self._snapshot.version

    @property
    def is_loaded(self) -> bool:
        """True once the first snapshot has arrived."""
        return self._loaded

    # =========================================================================
    # SNAPSHOT HANDLING
    # =========================================================================

    def on_snapshot(self, documents: Mapping[str, Mapping[str, Any]]) -> None:
        """
        Replace the collection with a freshly delivered snapshot.

        Args:
            documents: Complete {id: document} collection in store order
        """
        products = []
        for product_id, document in documents.items():
            try:
                products.append(Product.from_document(product_id, document))
            except ValueError as e:
                logger.warning(f"Skipping malformed product {product_id}: {e}")

        with self._lock:
            self._snapshot = CatalogSnapshot(
                version=self._snapshot.version + 1,
                products=tuple(products),
                by_id={product.id: product for product in products},
                categories=tuple(distinct_categories(products)),
                weight_bounds=compute_weight_bounds(products, self._default_bounds),
            )
            self._loaded = True

        logger.debug(f"Catalog snapshot v{self.version}: {len(products)} products")

    def attach(self, store) -> None:
        """Subscribe to a document store's snapshots."""
        self.detach()
        self._unsubscribe = store.subscribe(self.on_snapshot)
        logger.info(f"✅ Catalog subscribed: {len(self._snapshot.products)} products")

    def detach(self) -> None:
        """Drop the store subscription, if any."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # =========================================================================
    # QUERIES
    # =========================================================================

    def query(self, query: CatalogQuery, favorites: Iterable[str] = ()) -> List[Product]:
        """Filtered and sorted products for display."""
        return apply_query(self._snapshot.products, query, favorites)

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """Find product by document key."""
        return self._snapshot.by_id.get(product_id)

    def categories(self) -> List[str]:
        """Distinct categories across the full collection."""
        return list(self._snapshot.categories)

    def weight_bounds(self) -> WeightBounds:
        """Weight range control bounds for the full collection."""
        return self._snapshot.weight_bounds

    def get_stats(self) -> Dict[str, Any]:
        """Get catalog statistics."""
        snapshot = self._snapshot
        out_of_stock = sum(1 for product in snapshot.products if product.is_out_of_stock)

        return {
            "total_products": len(snapshot.products),
            "in_stock": len(snapshot.products) - out_of_stock,
            "out_of_stock": out_of_stock,
            "categories": {
                category: sum(1 for p in snapshot.products if p.category == category)
                for category in snapshot.categories
            },
            "version": snapshot.version,
        }


# =============================================================================
# SINGLETON INSTANCE MANAGEMENT
# =============================================================================

_catalog_instance: Optional[ProductCatalog] = None


def get_catalog() -> Optional[ProductCatalog]:
    """Get the global catalog instance."""
    return _catalog_instance


def init_catalog(store, default_bounds: WeightBounds = DEFAULT_WEIGHT_BOUNDS) -> ProductCatalog:
    """
    Initialize the global catalog instance and subscribe it to the store.

    Args:
        store: DocumentStore delivering product snapshots
        default_bounds: Weight bounds used when no weight parses

    Returns:
        ProductCatalog instance
    """
    global _catalog_instance
    if _catalog_instance is not None:
        _catalog_instance.detach()

    catalog = ProductCatalog(default_bounds)
    catalog.attach(store)
    _catalog_instance = catalog
    return catalog


def shutdown_catalog() -> None:
    """Detach and drop the global catalog instance."""
    global _catalog_instance
    if _catalog_instance is not None:
        _catalog_instance.detach()
        _catalog_instance = None
