# app/schemas/payment.py
import uuid
from typing import Any, Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel

PaymentMethodId = Literal["credit_card", "paypal", "apple_pay", "google_pay"]


class PaymentMethodRead(SQLModel):
    id: PaymentMethodId
    name: str
    description: str
    icon: str


class PaymentRequest(SQLModel):
    """
    Payload for confirming payment of a pending order.

    payment_details is passed through to the gateway untouched.
    """

    model_config = ConfigDict(extra="forbid")

    order_id: uuid.UUID
    payment_method: PaymentMethodId
    payment_details: dict[str, Any] | None = None


class PaymentResponse(SQLModel):
    """
    Outcome of a payment attempt. Exactly one of payment_id / error is set.
    """

    success: bool
    order_id: uuid.UUID
    message: str | None = None
    payment_id: str | None = None
    error: str | None = None
