# app/schemas/product.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.common import Pagination
from app.schemas.review import ReviewRead

SortField = Literal["created_at", "price", "name", "rating"]
SortOrder = Literal["asc", "desc"]


class ProductImageIn(SQLModel):
    """
    Image reference supplied on product creation.
    """

    model_config = ConfigDict(extra="forbid")

    url: str
    alt_text: str | None = None


class ProductImageRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    image_url: str
    alt_text: str | None
    sort_order: int
    is_primary: bool


class ProductCreate(SQLModel):
    """
    Payload for creating a product.

    - images is optional: the first one becomes the primary image.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=255)
    description: str | None = None
    price: float = Field(gt=0)
    compare_price: float | None = Field(default=None, gt=0)
    sku: str | None = Field(default=None, max_length=64)
    stock_quantity: int = Field(default=0, ge=0)
    category_id: uuid.UUID | None = None
    brand: str | None = None
    weight: float | None = Field(default=None, ge=0)
    dimensions: str | None = None
    is_featured: bool = False
    meta_title: str | None = None
    meta_description: str | None = None
    images: list[ProductImageIn] = []

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

    @field_validator("sku")
    @classmethod
    def normalize_sku(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class ProductUpdate(SQLModel):
    """
    Partial update payload for products.
    All fields are optional.
    """

    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(default=None, max_length=255)
    description: str | None = None
    price: float | None = Field(default=None, gt=0)
    compare_price: float | None = Field(default=None, gt=0)
    sku: str | None = Field(default=None, max_length=64)
    stock_quantity: int | None = Field(default=None, ge=0)
    category_id: uuid.UUID | None = None
    brand: str | None = None
    weight: float | None = Field(default=None, ge=0)
    dimensions: str | None = None
    is_active: bool | None = None
    is_featured: bool | None = None
    meta_title: str | None = None
    meta_description: str | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v


class ProductRead(SQLModel):
    """
    Product representation for clients.
    """

    id: uuid.UUID
    name: str
    description: str | None
    price: float
    compare_price: float | None
    sku: str | None
    stock_quantity: int
    category_id: uuid.UUID | None
    brand: str | None
    weight: float | None
    dimensions: str | None
    is_active: bool
    is_featured: bool
    meta_title: str | None
    meta_description: str | None
    created_at: datetime
    updated_at: datetime


class ProductListItem(ProductRead):
    """
    Catalog row with derived fields (category, primary image, ratings).
    """

    category_name: str | None = None
    primary_image: str | None = None
    average_rating: float = 0.0
    review_count: int = 0


class ProductPage(SQLModel):
    products: list[ProductListItem]
    pagination: Pagination


class ProductDetail(ProductListItem):
    """
    Single product page: gallery plus the latest approved reviews.
    """

    images: list[ProductImageRead]
    reviews: list[ReviewRead]


class ProductFilters(SQLModel):
    """
    Query-string filters for the catalog listing.
    """

    category_id: uuid.UUID | None = None
    search: str | None = None
    min_price: float | None = Field(default=None, ge=0)
    max_price: float | None = Field(default=None, ge=0)
    featured: bool | None = None
    sort_by: SortField = "created_at"
    sort_order: SortOrder = "desc"

