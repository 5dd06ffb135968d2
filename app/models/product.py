# app/models/product.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import SQLModel, Field


class Category(SQLModel, table=True):
    """
    Catalog category. Deleting a category only flips is_active.
    """

    __tablename__ = "categories"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(max_length=100, unique=True, index=True)
    description: str | None = None
    image_url: str | None = None

    parent_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
    )

    is_active: bool = Field(default=True, index=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Product(SQLModel, table=True):
    """
    Product catalog entry.

    Checkout only ever touches `stock_quantity`; everything else is
    maintained by admins.
    """

    __tablename__ = "products"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    name: str = Field(
        max_length=255,
        index=True,
        description="Display name of the product",
    )

    description: str | None = Field(
        default=None,
        description="Optional long description",
    )

    price: float = Field(
        gt=0,
        description="Unit price in store currency",
    )

    compare_price: float | None = Field(
        default=None,
        description="Strike-through 'was' price",
    )

    sku: str | None = Field(
        default=None,
        unique=True,
        index=True,
    )

    stock_quantity: int = Field(
        default=0,
        ge=0,
        description="How many units currently in stock",
    )

    category_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="categories.id",
        index=True,
    )

    brand: str | None = None
    weight: float | None = None
    dimensions: str | None = None

    is_active: bool = Field(
        default=True,
        index=True,
        description="Whether this product is visible on the storefront",
    )

    is_featured: bool = Field(default=False, index=True)

    meta_title: str | None = None
    meta_description: str | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class ProductImage(SQLModel, table=True):
    """
    Gallery images for a product. At most one is flagged primary.
    """

    __tablename__ = "product_images"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
        description="FK to products.id",
    )

    image_url: str
    alt_text: str | None = None

    sort_order: int = Field(
        default=0,
        ge=0,
        description="Ordering index within the gallery",
    )

    is_primary: bool = Field(default=False)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class Review(SQLModel, table=True):
    """
    Customer review. One review per (user, product).
    """

    __tablename__ = "reviews"
    __table_args__ = (
        UniqueConstraint("product_id", "user_id", name="u_review_product_user"),
    )

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    product_id: uuid.UUID = Field(foreign_key="products.id", index=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)

    rating: int = Field(ge=1, le=5)
    title: str | None = None
    comment: str | None = None

    is_verified: bool = Field(
        default=False,
        description="Reviewer has a paid or delivered order containing this product",
    )
    is_approved: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
