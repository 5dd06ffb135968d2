# app/models/order.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class Order(SQLModel, table=True):
    """
    Customer order.

    Created once per checkout. After creation only the status / payment
    fields (and their timestamps) change; rows are never deleted.
    """

    __tablename__ = "orders"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    user_id: uuid.UUID = Field(
        foreign_key="users.id",
        index=True,
    )

    # ORD-<epoch ms>-<9 chars>, shown to customers
    order_number: str = Field(
        unique=True,
        index=True,
        max_length=40,
    )

    # pending | confirmed | processing | shipped | delivered | cancelled
    status: str = Field(
        default="pending",
        index=True,
        description="Order status lifecycle",
    )

    subtotal: float
    tax_amount: float = Field(default=0.0)
    shipping_amount: float = Field(default=0.0)
    discount_amount: float = Field(default=0.0)
    total_amount: float = Field(
        description="subtotal + tax + shipping - discount",
    )
    currency: str = Field(default="USD", max_length=3)

    # pending | completed | failed
    payment_status: str = Field(default="pending", index=True)
    payment_method: str | None = None
    payment_id: str | None = None

    shipping_address_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="addresses.id",
    )
    billing_address_id: uuid.UUID | None = Field(
        default=None,
        foreign_key="addresses.id",
    )

    notes: str | None = None

    shipped_at: datetime | None = None
    delivered_at: datetime | None = None

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class OrderItem(SQLModel, table=True):
    """
    Line item inside an order.

    Snapshot of the product at checkout time; later price or name edits
    on the product never reach this row.
    """

    __tablename__ = "order_items"

    id: uuid.UUID = Field(
        default_factory=uuid.uuid4,
        primary_key=True,
        index=True,
    )

    order_id: uuid.UUID = Field(
        foreign_key="orders.id",
        index=True,
    )

    product_id: uuid.UUID = Field(
        foreign_key="products.id",
        index=True,
    )

    product_name: str
    product_sku: str | None = None
    product_image_url: str | None = None

    quantity: int = Field(
        gt=0,
        description="Quantity ordered (>=1)",
    )

    unit_price: float = Field(
        description="Unit price at time of order (pre-tax)",
    )
    total_price: float = Field(
        description="unit_price * quantity",
    )

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
