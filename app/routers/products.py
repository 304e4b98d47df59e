# =============================================================================
# app/routers/products.py - Product Endpoints
# =============================================================================
# CRUD for product listings. Create and update take multipart forms so the
# images travel with the fields.
# =============================================================================

import logging
from typing import Annotated, Literal

from fastapi import APIRouter, File, Form, Path, Query, UploadFile, status

from app.auth import SessionDep
from app.dependencies import ProductEditorDep
from app.routers.editing import create_record, delete_record, update_record
from core.models.catalog import PRODUCT_CATEGORIES, DeleteResponse, ProductView
from lib.listing import search_rows

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/categories", response_model=list[str])
async def list_categories(session: SessionDep):
    """Categories a product can be filed under."""
    return PRODUCT_CATEGORIES


@router.get("", response_model=list[ProductView])
async def list_products(
    session: SessionDep,
    editor: ProductEditorDep,
    q: Annotated[str | None, Query(description="Search name, category and price")] = None,
    sort_by: Literal["created_at", "name", "price", "category"] = "created_at",
    order: Literal["asc", "desc"] = "desc",
):
    """
    List products, newest first by default.

    Sorting happens in the database; the search filter runs on the result.
    """
    rows = editor.list_records(order_by=sort_by, descending=order == "desc")
    return search_rows(rows, q, ("name", "category", "price"))


@router.get("/{product_id}", response_model=ProductView)
async def get_product(
    session: SessionDep,
    editor: ProductEditorDep,
    product_id: Annotated[str, Path(description="Product ID")],
):
    return editor.present(editor.fetch(product_id))


@router.post("", response_model=ProductView, status_code=status.HTTP_201_CREATED)
async def create_product(
    session: SessionDep,
    editor: ProductEditorDep,
    name: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    files: Annotated[list[UploadFile] | None, File(description="Product images")] = None,
):
    """
    Create a product. At least one image is required.

    Images are uploaded first; the row is only written once all of them
    are stored.
    """
    return await create_record(
        editor,
        {"name": name, "price": price, "category": category},
        files,
    )


@router.patch("/{product_id}", response_model=ProductView)
async def update_product(
    session: SessionDep,
    editor: ProductEditorDep,
    product_id: Annotated[str, Path(description="Product ID")],
    name: Annotated[str | None, Form()] = None,
    price: Annotated[str | None, Form()] = None,
    category: Annotated[str | None, Form()] = None,
    files: Annotated[list[UploadFile] | None, File(description="Replacement images")] = None,
    remove_media: Annotated[list[int] | None, Form(description="Positions of images to drop")] = None,
):
    """
    Update a product.

    New images replace the current set. Without new images the stored
    images are left as they are.
    """
    return await update_record(
        editor,
        product_id,
        {"name": name, "price": price, "category": category},
        files,
        remove_media,
    )


@router.delete("/{product_id}", response_model=DeleteResponse)
async def delete_product(
    session: SessionDep,
    editor: ProductEditorDep,
    product_id: Annotated[str, Path(description="Product ID")],
):
    """Delete a product and its images."""
    return await delete_record(editor, product_id, "product")
