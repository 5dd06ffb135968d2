# app/schemas/cart.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class CartItemCreate(SQLModel):
    """
    Payload for adding to cart.
    """

    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    """
    Payload for updating quantity of a cart item.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int = Field(gt=0)


class CartItemRead(SQLModel):
    """
    Read model for a single cart item, priced from the live product row.

    is_available=False marks a line whose product was deactivated; it is
    left out of the cart totals and must be removed before checkout.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    quantity: int
    name: str
    price: float
    stock_quantity: int
    image_url: str | None = None
    line_total: float
    is_available: bool = True
    created_at: datetime


class CartSummary(SQLModel):
    """
    Full cart response model with totals.
    """

    items: list[CartItemRead]
    total: float
    item_count: int
