"""
==============================================================================
Product Form Schemas Module
==============================================================================

Structured admin form record and image upload payload.

The form is deliberately lenient: blank required fields are accepted here
and rejected by the admin service's required-field check, which runs
before any store or image store call.

==============================================================================
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from app.catalog.models import Product


REQUIRED_FIELDS = ("name", "weight", "category")


class AdminMode(str, enum.Enum):
    """Which action opened the admin form."""

    CREATE = "create"
    EDIT = "edit"

    def __str__(self) -> str:
        return self.value


class ProductForm(BaseModel):
    """
    Admin product form.

    Only fields present in `model_fields_set` count as submitted; edit mode
    writes just those.
    """

    name: str = Field(default="")
    weight: str = Field(default="")
    category: str = Field(default="")
    description: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None)
    in_stock: bool = Field(default=True)
    price: Optional[str] = Field(default=None)

    @field_validator("name", "weight", "category", mode="before")
    @classmethod
    def strip_required(cls, v: Any) -> str:
        return "" if v is None else str(v).strip()

    @field_validator("description", "image_url", "price")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            v = v.strip()
            return v if v else None
        return None

    @classmethod
    def from_product(cls, product: Product) -> "ProductForm":
        """Populate a form for editing a stored product."""
        return cls(
            name=product.name or "",
            weight=product.weight or "",
            category=product.category or "",
            description=product.description or "",
            image_url=product.image_url or "",
            in_stock=product.is_in_stock,
            price=product.price or "",
        )

    def required_values(self) -> Dict[str, str]:
        return {field: getattr(self, field) for field in REQUIRED_FIELDS}

    def submitted_fields(self) -> Dict[str, Any]:
        """
        Document fields for the submitted values, image excluded.

        Submitted blank optional fields map to None, which clears them.
        """
        mapping = {
            "name": "name",
            "weight": "weight",
            "category": "category",
            "description": "description",
            "in_stock": "inStock",
            "price": "price",
        }
        return {
            document_field: getattr(self, form_field)
            for form_field, document_field in mapping.items()
            if form_field in self.model_fields_set or form_field in REQUIRED_FIELDS
        }


class ProductFormResponse(BaseModel):
    """Edit form population response."""

    success: bool = Field(default=True)
    mode: AdminMode = Field(default=AdminMode.EDIT)
    product_id: str
    form: ProductForm


@dataclass(frozen=True)
class ImageUpload:
    """Binary image submitted with the admin form."""

    data: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None

    def __bool__(self) -> bool:
        return bool(self.data)
