"""
==============================================================================
Product Admin Endpoints
==============================================================================

Admin-only product management. Create and edit accept multipart form data
so an image file can be sent with the record.

Endpoints:
----------
    GET    /admin/products                      List stored products
    POST   /admin/products                      Create (new key)
    GET    /admin/products/{id}/form            Populate edit form
    PUT    /admin/products/{id}                 Edit submitted fields
    DELETE /admin/products/{id}?confirm=true    Delete
    POST   /admin/products/{id}/toggle-stock    Flip stock state

==============================================================================
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import ValidationError

from app.catalog.models import Product, ProductResponse
from app.core import exceptions
from app.core.dependencies import get_admin_service, require_admin
from app.schemas.auth import AdminInfo
from app.schemas.common import MessageResponse
from app.schemas.product import AdminMode, ImageUpload, ProductForm, ProductFormResponse
from app.services.product_admin_service import ProductAdminService


router = APIRouter(prefix="/admin/products", tags=["Admin Products"])


def _product_payload(product: Product) -> Dict[str, Any]:
    return ProductResponse.from_product(product).model_dump(by_alias=True, exclude={"is_favorite"})


def _build_form(**submitted: Any) -> ProductForm:
    """Form holding only the submitted fields, so edits leave the rest alone."""
    fields = {field: value for field, value in submitted.items() if value is not None}
    try:
        return ProductForm(**fields)
    except ValidationError as e:
        invalid = sorted({str(error["loc"][0]) for error in e.errors() if error["loc"]})
        raise exceptions.AppException(
            "Invalid product form", "VALIDATION_ERROR", 422, {"invalid": invalid}
        ) from e


async def _read_image(image: Optional[UploadFile]) -> Optional[ImageUpload]:
    if image is None:
        return None

    data = await image.read()
    upload = ImageUpload(data=data, content_type=image.content_type, filename=image.filename)
    return upload if upload else None


class ProductAdminController:
    """Controller for admin product operations."""

    def __init__(self, service: ProductAdminService):
        self._service = service

    def list_products(self) -> dict:
        """List every stored product, regardless of stock."""
        products = self._service.list_products()
        return {
            "success": True,
            "total": len(products),
            "products": [_product_payload(p) for p in products]
        }

    def save(
        self,
        mode: AdminMode,
        form: ProductForm,
        product_id: Optional[str],
        image: Optional[ImageUpload]
    ) -> dict:
        """Save the form in create or edit mode."""
        product = self._service.save(mode, form, product_id, image)
        return {
            "success": True,
            "mode": mode.value,
            "product": _product_payload(product)
        }

    def edit_form(self, product_id: str) -> ProductFormResponse:
        """Form values for editing an existing product."""
        form = self._service.edit_form(product_id)
        return ProductFormResponse(product_id=product_id, form=form)

    def toggle_stock(self, product_id: str) -> dict:
        """Flip stock state."""
        product = self._service.toggle_stock(product_id)
        return {
            "success": True,
            "product_id": product_id,
            "inStock": product.is_in_stock
        }


@router.get("")
async def list_products(
    admin: AdminInfo = Depends(require_admin),
    service: ProductAdminService = Depends(get_admin_service)
):
    """List all products for the admin table."""
    controller = ProductAdminController(service)
    return controller.list_products()


@router.post("", status_code=201)
async def create_product(
    name: Optional[str] = Form(None),
    weight: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None, alias="imageUrl"),
    in_stock: Optional[bool] = Form(None, alias="inStock"),
    price: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    admin: AdminInfo = Depends(require_admin),
    service: ProductAdminService = Depends(get_admin_service)
):
    """
    Create a product.

    Requires name, weight and category. An uploaded image is stored and its
    retrieval URL saved; otherwise imageUrl is used as given.
    """
    form = _build_form(
        name=name,
        weight=weight,
        category=category,
        description=description,
        image_url=image_url,
        in_stock=in_stock,
        price=price
    )
    controller = ProductAdminController(service)
    return controller.save(AdminMode.CREATE, form, None, await _read_image(image))


@router.get("/{product_id}/form", response_model=ProductFormResponse)
async def get_edit_form(
    product_id: str,
    admin: AdminInfo = Depends(require_admin),
    service: ProductAdminService = Depends(get_admin_service)
):
    """Get the edit form populated from the stored product."""
    controller = ProductAdminController(service)
    return controller.edit_form(product_id)


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    name: Optional[str] = Form(None),
    weight: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    image_url: Optional[str] = Form(None, alias="imageUrl"),
    in_stock: Optional[bool] = Form(None, alias="inStock"),
    price: Optional[str] = Form(None),
    image: Optional[UploadFile] = File(None),
    admin: AdminInfo = Depends(require_admin),
    service: ProductAdminService = Depends(get_admin_service)
):
    """
    Edit a product.

    Only submitted fields are written. The stored imageUrl is kept unless a
    new image or a non-blank imageUrl is sent.
    """
    form = _build_form(
        name=name,
        weight=weight,
        category=category,
        description=description,
        image_url=image_url,
        in_stock=in_stock,
        price=price
    )
    controller = ProductAdminController(service)
    return controller.save(AdminMode.EDIT, form, product_id, await _read_image(image))


@router.delete("/{product_id}", response_model=MessageResponse)
async def delete_product(
    product_id: str,
    confirm: bool = Query(False, description="Must be true to delete"),
    admin: AdminInfo = Depends(require_admin),
    service: ProductAdminService = Depends(get_admin_service)
):
    """Delete a product. Requires confirm=true."""
    service.delete_product(product_id, confirmed=confirm)
    return MessageResponse(message=f"Product {product_id} deleted")


@router.post("/{product_id}/toggle-stock")
async def toggle_stock(
    product_id: str,
    admin: AdminInfo = Depends(require_admin),
    service: ProductAdminService = Depends(get_admin_service)
):
    """Flip a product between in stock and out of stock."""
    controller = ProductAdminController(service)
    return controller.toggle_stock(product_id)
