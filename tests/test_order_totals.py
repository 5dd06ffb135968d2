# tests/test_order_totals.py
import random
import re

import pytest

from app.services.order_service import calculate_totals, generate_order_number
from app.services.payment_gateway import MockPaymentGateway, generate_payment_id


def totals(subtotal: float):
    return calculate_totals(
        subtotal,
        tax_rate=0.08,
        flat_shipping_fee=10.0,
        free_shipping_threshold=100.0,
    )


def test_below_threshold_pays_flat_shipping():
    result = totals(30.0)
    assert result.subtotal == 30.0
    assert result.tax_amount == 2.4
    assert result.shipping_amount == 10.0
    assert result.total_amount == 42.4


def test_above_threshold_ships_free():
    result = totals(120.0)
    assert result.tax_amount == 9.6
    assert result.shipping_amount == 0.0
    assert result.total_amount == 129.6


def test_threshold_itself_is_not_free():
    result = totals(100.0)
    assert result.shipping_amount == 10.0
    assert result.total_amount == 118.0


def test_amounts_are_rounded_to_cents():
    result = totals(19.99 * 3)
    assert result.subtotal == 59.97
    assert result.tax_amount == 4.8
    assert result.total_amount == 74.77


def test_discount_is_subtracted():
    result = calculate_totals(
        50.0,
        tax_rate=0.08,
        flat_shipping_fee=10.0,
        free_shipping_threshold=100.0,
        discount_amount=5.0,
    )
    assert result.discount_amount == 5.0
    assert result.total_amount == 59.0


def test_order_number_format():
    assert re.fullmatch(r"ORD-\d{13}-[A-Z0-9]{9}", generate_order_number())
    assert generate_order_number() != generate_order_number()


def test_payment_id_format():
    assert re.fullmatch(r"pay_\d{13}_[a-z0-9]{9}", generate_payment_id())


def test_mock_gateway_always_approves_at_full_rate():
    gateway = MockPaymentGateway(success_rate=1.0)
    result = gateway.charge(order=None, payment_method="credit_card")
    assert result.approved
    assert result.payment_id.startswith("pay_")
    assert result.decline_reason is None


def test_mock_gateway_always_declines_at_zero_rate():
    gateway = MockPaymentGateway(success_rate=0.0)
    result = gateway.charge(order=None, payment_method="paypal")
    assert not result.approved
    assert result.payment_id is None
    assert result.decline_reason == "Payment processing failed. Please try again."


def test_mock_gateway_uses_injected_rng():
    outcomes = [
        MockPaymentGateway(success_rate=0.5, rng=random.Random(7)).charge(None, "paypal").approved
        for _ in range(3)
    ]
    assert len(set(outcomes)) == 1


def test_mock_gateway_rejects_invalid_rate():
    with pytest.raises(ValueError):
        MockPaymentGateway(success_rate=1.5)
