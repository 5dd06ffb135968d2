# app/routers/products.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_admin, require_customer
from app.database import get_session
from app.models.user import User
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.review_repo import ReviewRepository
from app.schemas.common import Message
from app.schemas.product import (
    ProductCreate,
    ProductDetail,
    ProductFilters,
    ProductPage,
    ProductRead,
    ProductUpdate,
    SortField,
    SortOrder,
)
from app.schemas.review import ReviewCreate, ReviewRead
from app.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])

service = ProductService(ProductRepository(), CategoryRepository(), ReviewRepository())


# -------- Public endpoints --------


@router.get("", response_model=ProductPage)
def list_products(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    category_id: uuid.UUID | None = None,
    search: str | None = None,
    min_price: float | None = Query(None, ge=0),
    max_price: float | None = Query(None, ge=0),
    featured: bool | None = None,
    sort_by: SortField = "created_at",
    sort_order: SortOrder = "desc",
):
    """
    Paginated catalog listing.

    - Public endpoint, active products only.
    - `search` matches name or description (case-insensitive).
    - `sort_by=rating` sorts by average approved rating.
    """
    filters = ProductFilters(
        category_id=category_id,
        search=search.strip() if search and search.strip() else None,
        min_price=min_price,
        max_price=max_price,
        featured=featured,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return service.list_products(session, filters, page=page, limit=limit)


@router.get("/{product_id}", response_model=ProductDetail)
def get_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Product page: details, images and the latest approved reviews.
    """
    return service.get_product_detail(session, product_id)


@router.post(
    "/{product_id}/reviews",
    response_model=ReviewRead,
    status_code=status.HTTP_201_CREATED,
)
def add_review(
    product_id: uuid.UUID,
    payload: ReviewCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Review a product (one review per customer and product).
    """
    return service.add_review(session, current_user.id, product_id, payload)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_product(
    payload: ProductCreate,
    session: Session = Depends(get_session),
):
    """
    Create a new product (admin only).

    The first image in `images` becomes the primary image.
    """
    return service.create_product(session, payload)


@router.patch(
    "/{product_id}",
    response_model=ProductRead,
    dependencies=[Depends(require_admin)],
)
def update_product(
    product_id: uuid.UUID,
    payload: ProductUpdate,
    session: Session = Depends(get_session),
):
    """
    Partially update a product (admin only).
    """
    return service.update_product(session, product_id, payload)


@router.delete(
    "/{product_id}",
    response_model=Message,
    dependencies=[Depends(require_admin)],
)
def delete_product(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Soft delete a product (admin only).

    Past orders keep their item snapshots.
    """
    service.delete_product(session, product_id)
    return Message(message="Product deleted")
