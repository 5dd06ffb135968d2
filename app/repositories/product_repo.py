# app/repositories/product_repo.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, or_, update
from sqlmodel import Session, select

from app.models.product import Category, Product, ProductImage, Review
from app.schemas.product import ProductFilters


def primary_image_subquery():
    """
    product_id -> primary image url. Shared by cart and wishlist listings.
    """
    return (
        select(
            ProductImage.product_id.label("product_id"),
            func.min(ProductImage.image_url).label("primary_image"),
        )
        .where(ProductImage.is_primary == True)  # noqa: E712
        .group_by(ProductImage.product_id)
        .subquery()
    )


def rating_subquery():
    """
    product_id -> (average_rating, review_count) over approved reviews.
    """
    return (
        select(
            Review.product_id.label("product_id"),
            func.avg(Review.rating).label("average_rating"),
            func.count(Review.id).label("review_count"),
        )
        .where(Review.is_approved == True)  # noqa: E712
        .group_by(Review.product_id)
        .subquery()
    )


class ProductRepository:
    """
    Data access layer for Product & ProductImage.

    - Pure DB operations (CRUD + queries).
    - No FastAPI, no business logic.
    """

    # ----- Helpers -----

    @staticmethod
    def _listing_select():
        """
        Product row joined with category name, primary image and ratings.

        Returns (statement, average_rating expression) so callers can sort
        on the rating.
        """
        images = primary_image_subquery()
        ratings = rating_subquery()
        average = func.coalesce(ratings.c.average_rating, 0)

        stmt = (
            select(
                Product,
                Category.name,
                images.c.primary_image,
                average.label("average_rating"),
                func.coalesce(ratings.c.review_count, 0).label("review_count"),
            )
            .outerjoin(Category, Category.id == Product.category_id)
            .outerjoin(images, images.c.product_id == Product.id)
            .outerjoin(ratings, ratings.c.product_id == Product.id)
        )
        return stmt, average

    @staticmethod
    def _apply_filters(stmt, filters: ProductFilters):
        stmt = stmt.where(Product.is_active == True)  # noqa: E712

        if filters.category_id is not None:
            stmt = stmt.where(Product.category_id == filters.category_id)

        if filters.search:
            pattern = f"%{filters.search.strip().lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(Product.name).like(pattern),
                    func.lower(func.coalesce(Product.description, "")).like(pattern),
                )
            )

        if filters.min_price is not None:
            stmt = stmt.where(Product.price >= filters.min_price)

        if filters.max_price is not None:
            stmt = stmt.where(Product.price <= filters.max_price)

        if filters.featured:
            stmt = stmt.where(Product.is_featured == True)  # noqa: E712

        return stmt

    # ----- Products -----

    def get_by_id(self, session: Session, product_id: uuid.UUID) -> Product | None:
        return session.get(Product, product_id)

    def get_by_sku(self, session: Session, sku: str) -> Product | None:
        stmt = select(Product).where(Product.sku == sku)
        return session.exec(stmt).first()

    def search(
        self,
        session: Session,
        filters: ProductFilters,
        skip: int = 0,
        limit: int = 12,
    ) -> list[Any]:
        """
        Filtered, sorted catalog page.

        Rows are (Product, category_name, primary_image,
        average_rating, review_count).
        """
        stmt, average = self._listing_select()
        stmt = self._apply_filters(stmt, filters)

        sort_columns = {
            "created_at": Product.created_at,
            "price": Product.price,
            "name": Product.name,
            "rating": average,
        }
        column = sort_columns[filters.sort_by]
        ordering = column.asc() if filters.sort_order == "asc" else column.desc()

        stmt = stmt.order_by(ordering, Product.id).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count(self, session: Session, filters: ProductFilters) -> int:
        stmt = self._apply_filters(select(func.count()).select_from(Product), filters)
        return int(session.exec(stmt).one() or 0)

    def get_listing_row(
        self,
        session: Session,
        product_id: uuid.UUID,
        only_active: bool = True,
    ) -> Any | None:
        stmt, _ = self._listing_select()
        stmt = stmt.where(Product.id == product_id)
        if only_active:
            stmt = stmt.where(Product.is_active == True)  # noqa: E712
        return session.exec(stmt).first()

    def create(
        self,
        session: Session,
        product: Product,
        images: list[ProductImage] | None = None,
    ) -> Product:
        session.add(product)
        session.flush()
        for image in images or []:
            image.product_id = product.id
            session.add(image)
        session.commit()
        session.refresh(product)
        return product

    def update(self, session: Session, product: Product) -> Product:
        product.updated_at = datetime.now(timezone.utc)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    def decrement_stock(
        self,
        session: Session,
        product_id: uuid.UUID,
        quantity: int,
    ) -> bool:
        """
        Conditionally take `quantity` units off the shelf in one statement.

        Matches no row (returns False) when the product no longer has
        enough stock. Does not commit.
        """
        stmt = (
            update(Product)
            .where(
                Product.id == product_id,
                Product.stock_quantity >= quantity,
            )
            .values(
                stock_quantity=Product.stock_quantity - quantity,
                updated_at=datetime.now(timezone.utc),
            )
        )
        result = session.exec(stmt)
        return result.rowcount == 1

    # ----- Product images -----

    def list_images_for_product(
        self,
        session: Session,
        product_id: uuid.UUID,
    ) -> list[ProductImage]:
        stmt = (
            select(ProductImage)
            .where(ProductImage.product_id == product_id)
            .order_by(ProductImage.is_primary.desc(), ProductImage.sort_order)
        )
        return list(session.exec(stmt).all())
