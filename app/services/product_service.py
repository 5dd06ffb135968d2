# app/services/product_service.py
import uuid
from typing import Any

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.product import Product, ProductImage, Review
from app.repositories.category_repo import CategoryRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.review_repo import ReviewRepository
from app.schemas.common import build_pagination
from app.schemas.product import (
    ProductCreate,
    ProductDetail,
    ProductFilters,
    ProductImageRead,
    ProductListItem,
    ProductPage,
    ProductRead,
    ProductUpdate,
)
from app.schemas.review import ReviewCreate, ReviewRead

# Latest reviews shown on the product page
PRODUCT_PAGE_REVIEWS = 10


class ProductService:
    """
    Business logic for the catalog: listing, detail, admin CRUD, reviews.

    Responsibilities:
      - SKU uniqueness and category existence
      - derived listing fields (primary image, ratings)
      - soft delete (is_active = False)
      - admin-only operations (enforced at router via require_admin)
    """

    def __init__(
        self,
        repo: ProductRepository,
        category_repo: CategoryRepository,
        review_repo: ReviewRepository,
    ):
        self.repo = repo
        self.category_repo = category_repo
        self.review_repo = review_repo

    # ----- Helpers -----

    @staticmethod
    def _listing_item(row: Any) -> ProductListItem:
        product, category_name, primary_image, average_rating, review_count = row
        return ProductListItem.model_validate(
            product,
            update={
                "category_name": category_name,
                "primary_image": primary_image,
                "average_rating": round(float(average_rating or 0), 2),
                "review_count": int(review_count or 0),
            },
        )

    def _ensure_unique_sku(
        self,
        session: Session,
        sku: str | None,
        product_id: uuid.UUID | None = None,
    ) -> None:
        if sku is None:
            return
        existing = self.repo.get_by_sku(session, sku)
        if existing and existing.id != product_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="SKU already in use",
            )

    def _ensure_category(self, session: Session, category_id: uuid.UUID | None) -> None:
        if category_id is None:
            return
        category = self.category_repo.get_by_id(session, category_id)
        if not category or not category.is_active:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Category not found",
            )

    def _get_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.repo.get_by_id(session, product_id)
        if not product:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    # ----- Catalog -----

    def list_products(
        self,
        session: Session,
        filters: ProductFilters,
        page: int = 1,
        limit: int = 12,
    ) -> ProductPage:
        if (
            filters.min_price is not None
            and filters.max_price is not None
            and filters.min_price > filters.max_price
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="min_price cannot exceed max_price",
            )

        rows = self.repo.search(session, filters, skip=(page - 1) * limit, limit=limit)
        total = self.repo.count(session, filters)
        return ProductPage(
            products=[self._listing_item(row) for row in rows],
            pagination=build_pagination(page, limit, total),
        )

    def get_product_detail(self, session: Session, product_id: uuid.UUID) -> ProductDetail:
        """
        Active product with gallery and latest approved reviews.
        """
        row = self.repo.get_listing_row(session, product_id)
        if row is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        images = self.repo.list_images_for_product(session, product_id)
        reviews = self.review_repo.list_for_product(
            session, product_id, limit=PRODUCT_PAGE_REVIEWS
        )

        item = self._listing_item(row)
        return ProductDetail(
            **item.model_dump(),
            images=[ProductImageRead.model_validate(img) for img in images],
            reviews=[
                ReviewRead.model_validate(
                    review, update={"first_name": first, "last_name": last}
                )
                for review, first, last in reviews
            ],
        )

    # ----- Admin -----

    def create_product(self, session: Session, payload: ProductCreate) -> ProductRead:
        self._ensure_unique_sku(session, payload.sku)
        self._ensure_category(session, payload.category_id)

        product = Product(**payload.model_dump(exclude={"images"}))
        images = [
            ProductImage(
                product_id=product.id,
                image_url=image.url,
                alt_text=image.alt_text or payload.name,
                sort_order=index,
                is_primary=index == 0,
            )
            for index, image in enumerate(payload.images)
        ]
        product = self.repo.create(session, product, images)
        return ProductRead.model_validate(product)

    def update_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        payload: ProductUpdate,
    ) -> ProductRead:
        """
        Partial update. Price changes never touch existing order items.
        """
        product = self._get_product(session, product_id)
        changes = payload.model_dump(exclude_unset=True)

        if "sku" in changes:
            self._ensure_unique_sku(session, changes["sku"], product.id)
        if changes.get("category_id") is not None:
            self._ensure_category(session, changes["category_id"])

        for field, value in changes.items():
            setattr(product, field, value)

        return ProductRead.model_validate(self.repo.update(session, product))

    def delete_product(self, session: Session, product_id: uuid.UUID) -> None:
        """
        Soft delete: the row stays for order history and carts.
        """
        product = self._get_product(session, product_id)
        product.is_active = False
        self.repo.update(session, product)

    # ----- Reviews -----

    def add_review(
        self,
        session: Session,
        user_id: uuid.UUID,
        product_id: uuid.UUID,
        payload: ReviewCreate,
    ) -> ReviewRead:
        """
        One review per (user, product). Verified when the user has a
        paid or delivered order containing the product.
        """
        product = self._get_product(session, product_id)
        if not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        if self.review_repo.get_for_user(session, user_id, product_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="You have already reviewed this product",
            )

        review = Review(
            product_id=product_id,
            user_id=user_id,
            rating=payload.rating,
            title=payload.title,
            comment=payload.comment,
            is_verified=self.review_repo.has_paid_order_with(session, user_id, product_id),
        )
        review = self.review_repo.create(session, review)
        return ReviewRead.model_validate(review)
