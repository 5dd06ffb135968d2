# app/services/payment_gateway.py
"""
Payment gateway capability used by checkout.

The order flow only depends on `PaymentGateway`; the mock below stands in
for a real processor and can be swapped through the `get_payment_gateway`
FastAPI dependency without touching order logic.
"""
import random
import secrets
import string
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from app.core.config import get_settings
from app.models.order import Order


@dataclass(frozen=True)
class ChargeResult:
    """
    Gateway verdict for a single charge attempt.

    approved=True carries a payment_id; approved=False carries a reason.
    """

    approved: bool
    payment_id: str | None = None
    decline_reason: str | None = None


class PaymentGateway(ABC):
    @abstractmethod
    def charge(
        self,
        order: Order,
        payment_method: str,
        payment_details: dict[str, Any] | None = None,
    ) -> ChargeResult:
        pass


def generate_payment_id() -> str:
    """pay_<epoch ms>_<9 lower-case alphanumerics>"""
    alphabet = string.ascii_lowercase + string.digits
    suffix = "".join(secrets.choice(alphabet) for _ in range(9))
    return f"pay_{int(time.time() * 1000)}_{suffix}"


class MockPaymentGateway(PaymentGateway):
    """
    Random-outcome gateway for demos and local development.

    Approves a charge with probability `success_rate`.
    """

    def __init__(self, success_rate: float = 0.9, rng: random.Random | None = None):
        if not 0.0 <= success_rate <= 1.0:
            raise ValueError("success_rate must be between 0 and 1")
        self.success_rate = success_rate
        self._rng = rng or random.Random()

    def charge(
        self,
        order: Order,
        payment_method: str,
        payment_details: dict[str, Any] | None = None,
    ) -> ChargeResult:
        if self._rng.random() < self.success_rate:
            return ChargeResult(approved=True, payment_id=generate_payment_id())
        return ChargeResult(
            approved=False,
            decline_reason="Payment processing failed. Please try again.",
        )


@lru_cache
def get_payment_gateway() -> PaymentGateway:
    """
    FastAPI dependency returning the configured gateway.
    Override in app.dependency_overrides to plug in another one.
    """
    settings = get_settings()
    return MockPaymentGateway(success_rate=settings.MOCK_PAYMENT_SUCCESS_RATE)
