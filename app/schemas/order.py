# app/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from app.schemas.address import AddressRead
from app.schemas.common import Pagination

OrderStatus = Literal[
    "pending",
    "confirmed",
    "processing",
    "shipped",
    "delivered",
    "cancelled",
]
PaymentStatus = Literal["pending", "completed", "failed"]


class OrderCreate(SQLModel):
    """
    Payload for creating an order from the current cart.

    User provides:
      - shipping / billing address ids (optional, must be their own)
      - payment method label (optional at this stage)
      - notes (optional)

    Backend derives:
      - user_id from token
      - status = 'pending', payment_status = 'pending'
      - subtotal / tax / shipping / total from cart
      - items from cart
    """

    model_config = ConfigDict(extra="forbid")

    shipping_address_id: uuid.UUID | None = None
    billing_address_id: uuid.UUID | None = None
    payment_method: str | None = Field(default=None, max_length=50)
    notes: str | None = None

    @field_validator("notes", "payment_method")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderCreated(SQLModel):
    """
    Checkout response: just enough for the client to start payment.
    """

    message: str = "Order created successfully"
    order_id: uuid.UUID
    order_number: str
    total_amount: float


class OrderRead(SQLModel):
    """
    Lightweight representation of an order (without items).
    """

    id: uuid.UUID
    user_id: uuid.UUID
    order_number: str
    status: OrderStatus
    subtotal: float
    tax_amount: float
    shipping_amount: float
    discount_amount: float
    total_amount: float
    currency: str
    payment_status: PaymentStatus
    payment_method: str | None
    payment_id: str | None
    shipping_address_id: uuid.UUID | None
    billing_address_id: uuid.UUID | None
    notes: str | None
    shipped_at: datetime | None
    delivered_at: datetime | None
    created_at: datetime
    updated_at: datetime


class OrderSummary(OrderRead):
    item_count: int = 0


class OrderPage(SQLModel):
    orders: list[OrderSummary]
    pagination: Pagination


class AdminOrderSummary(OrderSummary):
    """
    Admin listing row, with the customer's name and email.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None


class AdminOrderPage(SQLModel):
    orders: list[AdminOrderSummary]
    pagination: Pagination


class OrderItemRead(SQLModel):
    """
    Representation of a single order line item (snapshot).
    """

    id: uuid.UUID
    order_id: uuid.UUID
    product_id: uuid.UUID
    product_name: str
    product_sku: str | None
    product_image_url: str | None
    quantity: int
    unit_price: float
    total_price: float


class OrderDetail(OrderRead):
    """
    Full order view including items and resolved addresses.
    """

    items: list[OrderItemRead]
    shipping_address: AddressRead | None = None
    billing_address: AddressRead | None = None


class OrderStatusUpdate(SQLModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: OrderStatus
