"""
==============================================================================
Product Models Module
==============================================================================

Pydantic models for catalog products and catalog queries.

==============================================================================
"""

from __future__ import annotations

import enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.utils.parsing import parse_measure


class Product(BaseModel):
    """
    Product model for catalog items.

    Mirrors one flat document of the `products` collection. Weight and
    price stay display strings; numeric views are parsed on demand.

    Attributes:
        id: Document key
        name: Product display name
        weight: Weight display string, e.g. "10g"
        category: Free-text category
        description: Optional long description
        image_url: Direct URL or image store retrieval URL
        in_stock: Explicit stock flag; None means "not set" (in stock)
        price: Informational price string
    """

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    id: str
    name: str = Field(default="", description="Product name")
    weight: Optional[str] = Field(default=None, description="Weight display string")
    category: Optional[str] = Field(default=None, description="Category")
    description: Optional[str] = Field(default=None, description="Description")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    in_stock: Optional[bool] = Field(default=None, alias="inStock")
    price: Optional[str] = Field(default=None, description="Price display string")

    @classmethod
    def from_document(cls, product_id: str, document: Mapping[str, Any]) -> "Product":
        """Build a product from a stored document."""
        return cls(id=product_id, **dict(document))

    @property
    def is_in_stock(self) -> bool:
        """Anything but an explicit False counts as in stock."""
        return self.in_stock is not False

    @property
    def is_out_of_stock(self) -> bool:
        return self.in_stock is False

    @property
    def parsed_weight(self) -> Optional[float]:
        """Numeric weight, or None when the weight string does not parse."""
        return parse_measure(self.weight)


class StockFilter(str, enum.Enum):
    """Stock state filter options."""

    ALL = "all"
    IN_STOCK = "inStock"
    OUT_OF_STOCK = "outOfStock"

    def __str__(self) -> str:
        return self.value


class SortOption(str, enum.Enum):
    """
    Catalog sort orders.

    FEATURED keeps the collection order; the others sort stably.
    """

    FEATURED = "featured"
    WEIGHT_LOW_TO_HIGH = "weightLowToHigh"
    WEIGHT_HIGH_TO_LOW = "weightHighToLow"
    NAME_AZ = "nameAZ"
    NAME_ZA = "nameZA"

    def __str__(self) -> str:
        return self.value


class CatalogQuery(BaseModel):
    """
    Filter and sort configuration for the catalog.

    All active filters combine with AND. Unset weight bounds are open.
    """

    model_config = ConfigDict(frozen=True)

    search: str = Field(default="", description="Substring of name or description")
    category: Optional[str] = Field(default=None, description="Exact category")
    stock: StockFilter = Field(default=StockFilter.ALL)
    weight_min: Optional[float] = Field(default=None, description="Inclusive lower weight")
    weight_max: Optional[float] = Field(default=None, description="Inclusive upper weight")
    favorites_only: bool = Field(default=False)
    sort: SortOption = Field(default=SortOption.FEATURED)


class WeightBounds(BaseModel):
    """Weight range control bounds derived from the full collection."""

    model_config = ConfigDict(frozen=True)

    min: int
    max: int


class ProductResponse(BaseModel):
    """Product response schema for API endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    weight: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = Field(default=None, serialization_alias="imageUrl")
    in_stock: bool = Field(serialization_alias="inStock")
    price: Optional[str] = None
    is_favorite: bool = Field(default=False, serialization_alias="isFavorite")

    @classmethod
    def from_product(cls, product: Product, is_favorite: bool = False) -> "ProductResponse":
        """Create response from Product model."""
        return cls(
            id=product.id,
            name=product.name,
            weight=product.weight,
            category=product.category,
            description=product.description,
            image_url=product.image_url,
            in_stock=product.is_in_stock,
            price=product.price,
            is_favorite=is_favorite,
        )
