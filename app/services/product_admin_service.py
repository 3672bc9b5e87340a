"""
==============================================================================
Product Admin Service Module
==============================================================================

Create, edit, delete and stock toggling of catalog products.

This module implements:
- ProductAdminService: Admin operations against the document store
- Image resolution with optional upload to the image store

Save Flow:
----------
    ┌──────────────┐     ┌─────────────┐
    │  Required    │────▶│  Missing    │ → VALIDATION_ERROR (no I/O)
    │  fields      │     │  field      │
    └──────┬───────┘     └─────────────┘
           │
    ┌──────▼───────┐
    │ Key: new     │  create: push_key()
    │ or existing  │  edit:   must exist
    └──────┬───────┘
           │
    ┌──────▼───────┐
    │ Resolve      │  1. uploaded file → products/{id} → retrieval URL
    │ image URL    │  2. literal imageUrl
    └──────┬───────┘  3. edit: keep stored URL / create: none
           │
    ┌──────▼───────┐
    │ Write        │  create: set() full record
    │ document     │  edit:   update() submitted fields only
    └──────────────┘

Store and image store failures are logged and surfaced as
STORE_UNAVAILABLE / BLOB_STORE_UNAVAILABLE. Concurrent admins are
last-write-wins per field; there is no conflict detection.

==============================================================================
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Generator, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from app.catalog.models import Product
from app.core import exceptions
from app.schemas.product import REQUIRED_FIELDS, AdminMode, ImageUpload, ProductForm
from app.store.blob_store import BlobStore
from app.store.document_store import DocumentStore
from app.utils.validators import RequiredFieldValidator


# Module logger
logger = logging.getLogger(__name__)


class ProductAdminService:
    """
    Admin operations on catalog products.

    Attributes:
        _store: Product document store
        _blobs: Product image store

    Example:
        >>> service = ProductAdminService(store, blobs)
        >>> product = service.save(AdminMode.CREATE, ProductForm(
        ...     name="Rope Chain", weight="12g", category="Chains"
        ... ))
        >>> service.toggle_stock(product.id).in_stock
        False
    """

    IMAGE_KEY_PREFIX = "products"

    def __init__(self, store: DocumentStore, blobs: BlobStore) -> None:
        self._store = store
        self._blobs = blobs
        self._validator = RequiredFieldValidator(REQUIRED_FIELDS)

    # =========================================================================
    # ERROR TRANSLATION
    # =========================================================================

    @contextmanager
    def _store_call(self, operation: str) -> Generator[None, None, None]:
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(f"❌ Store failure while trying to {operation}: {e}")
            raise exceptions.store_unavailable(operation) from e

    @contextmanager
    def _blob_call(self, key: str) -> Generator[None, None, None]:
        try:
            yield
        except OSError as e:
            logger.error(f"❌ Image store failure for {key}: {e}")
            raise exceptions.blob_store_unavailable(key) from e

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def list_products(self) -> List[Product]:
        """All products in store order."""
        with self._store_call("load products"):
            snapshot = self._store.snapshot()
        return [Product.from_document(key, doc) for key, doc in snapshot.items()]

    def get_product(self, product_id: str) -> Product:
        """
        Get one product.

        Raises:
            AppException: PRODUCT_NOT_FOUND
        """
        with self._store_call("load the product"):
            document = self._store.get(product_id)

        if document is None:
            raise exceptions.product_not_found(product_id)
        return Product.from_document(product_id, document)

    def edit_form(self, product_id: str) -> ProductForm:
        """Form populated from a stored product, for edit mode."""
        return ProductForm.from_product(self.get_product(product_id))

    # =========================================================================
    # SAVE OPERATIONS
    # =========================================================================

    def validate(self, form: ProductForm) -> None:
        """
        Required-field check, run before any I/O.

        Raises:
            AppException: VALIDATION_ERROR listing the missing fields
        """
        is_valid, missing = self._validator.validate(form.required_values())
        if not is_valid:
            logger.info(f"Product form rejected, missing: {', '.join(missing)}")
            raise exceptions.missing_required_fields(missing)

    def save(
        self,
        mode: AdminMode,
        form: ProductForm,
        product_id: Optional[str] = None,
        image: Optional[ImageUpload] = None
    ) -> Product:
        """
        Save the admin form in the mode that opened it.

        Args:
            mode: CREATE or EDIT
            form: Submitted form
            product_id: Product being edited (EDIT only)
            image: Optional uploaded image

        Returns:
            The saved product
        """
        if mode == AdminMode.EDIT:
            if not product_id:
                raise ValueError("Edit mode needs a product id")
            return self.update_product(product_id, form, image)

        if product_id:
            raise ValueError("Create mode allocates its own product id")
        return self.create_product(form, image)

    def create_product(self, form: ProductForm, image: Optional[ImageUpload] = None) -> Product:
        """Allocate a new key and write the full record."""
        self.validate(form)

        product_id = self._store.push_key()
        record: Dict[str, Any] = {
            "name": form.name,
            "weight": form.weight,
            "category": form.category,
            "description": form.description,
            "inStock": form.in_stock,
            "price": form.price,
        }

        image_url = self._resolve_image_url(product_id, form, image)
        if image_url:
            record["imageUrl"] = image_url

        record = {field: value for field, value in record.items() if value is not None}

        with self._store_call("save the product"):
            self._store.set(product_id, record)

        logger.info(f"✅ Product created: {product_id} ({form.name})")
        return Product.from_document(product_id, record)

    def update_product(
        self,
        product_id: str,
        form: ProductForm,
        image: Optional[ImageUpload] = None
    ) -> Product:
        """
        Merge the submitted fields into an existing product.

        The stored imageUrl is kept unless a new file or URL is submitted.
        """
        self.validate(form)
        self.get_product(product_id)

        changes = form.submitted_fields()
        image_url = self._resolve_image_url(product_id, form, image)
        if image_url:
            changes["imageUrl"] = image_url

        with self._store_call("update the product"):
            self._store.update(product_id, changes)

        logger.info(f"✅ Product updated: {product_id} fields={sorted(changes)}")
        return self.get_product(product_id)

    def _resolve_image_url(
        self,
        product_id: str,
        form: ProductForm,
        image: Optional[ImageUpload]
    ) -> Optional[str]:
        """Uploaded file first, then the literal URL; None keeps/omits."""
        if image:
            key = f"{self.IMAGE_KEY_PREFIX}/{product_id}"
            with self._blob_call(key):
                self._blobs.upload_bytes(key, image.data, image.content_type)
                return self._blobs.get_download_url(key)

        return form.image_url or None

    # =========================================================================
    # DELETE / STOCK OPERATIONS
    # =========================================================================

    def delete_product(self, product_id: str, confirmed: bool = False) -> None:
        """
        Remove a product document.

        Deleting an unknown id is a no-op.

        Raises:
            AppException: CONFIRMATION_REQUIRED when not confirmed
        """
        if not confirmed:
            raise exceptions.confirmation_required("delete this product")

        with self._store_call("delete the product"):
            self._store.remove(product_id)

        logger.info(f"🗑️ Product deleted: {product_id}")

    def toggle_stock(self, product_id: str) -> Product:
        """Flip the stock state with a partial update of inStock only."""
        product = self.get_product(product_id)
        in_stock = not product.is_in_stock

        with self._store_call("update stock"):
            self._store.update(product_id, {"inStock": in_stock})

        logger.info(f"Product {product_id} stock → {'in' if in_stock else 'out of'} stock")
        return product.model_copy(update={"in_stock": in_stock})
