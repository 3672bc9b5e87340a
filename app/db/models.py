"""
==============================================================================
SQLAlchemy ORM Models Module
==============================================================================

Table backing the `products` document collection.

Database Schema:
---------------

    ┌─────────────────────────────────────────────────────────────────┐
    │                           products                               │
    ├─────────────────────────────────────────────────────────────────┤
    │ id (VARCHAR(20), PK)          time-ordered push key              │
    │ name (VARCHAR, NULLABLE)                                        │
    │ weight (VARCHAR, NULLABLE)    display string, e.g. "10g"        │
    │ category (VARCHAR, NULLABLE)                                    │
    │ description (TEXT, NULLABLE)                                    │
    │ image_url (VARCHAR, NULLABLE)                                   │
    │ in_stock (BOOLEAN, NULLABLE)  NULL means "not set"              │
    │ price (VARCHAR, NULLABLE)     display string                    │
    │ updated_at (DATETIME)                                           │
    └─────────────────────────────────────────────────────────────────┘

Every document column is nullable: the store keeps whatever flat record
it is given and a NULL column is an absent document field. Required-field
rules live in the admin service.

=============================================================================
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import Boolean, Column, DateTime, String, Text

from app.db.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductDocument(Base):
    """
    One document of the `products` collection.

    The mapping between document field names and columns is kept in
    FIELD_COLUMNS so the store can translate flat records both ways.
    """

    __tablename__ = "products"

    # Document field name -> column attribute
    FIELD_COLUMNS: Dict[str, str] = {
        "name": "name",
        "weight": "weight",
        "category": "category",
        "description": "description",
        "imageUrl": "image_url",
        "inStock": "in_stock",
        "price": "price",
    }

    id = Column(String(20), primary_key=True)
    name = Column(String, nullable=True)
    weight = Column(String, nullable=True)
    category = Column(String, nullable=True, index=True)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    in_stock = Column(Boolean, nullable=True)
    price = Column(String, nullable=True)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def to_document(self) -> Dict[str, Any]:
        """Flat document with absent (NULL) fields omitted."""
        document = {}
        for field, column in self.FIELD_COLUMNS.items():
            value = getattr(self, column)
            if value is not None:
                document[field] = value
        return document

    def apply(self, fields: Dict[str, Any]) -> None:
        """Write document fields onto the columns (None clears a field)."""
        for field, value in fields.items():
            setattr(self, self.FIELD_COLUMNS[field], value)

    def clear(self) -> None:
        """Reset every document field to absent."""
        for column in self.FIELD_COLUMNS.values():
            setattr(self, column, None)

    def __repr__(self) -> str:
        return f"<ProductDocument(id={self.id!r}, name={self.name!r})>"
