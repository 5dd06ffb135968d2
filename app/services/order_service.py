# app/services/order_service.py
import logging
import secrets
import string
import time
import uuid
from datetime import datetime, timezone
from typing import NamedTuple

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.config import Settings, get_settings
from app.models.order import Order, OrderItem
from app.repositories.address_repo import AddressRepository
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.address import AddressRead
from app.schemas.common import build_pagination
from app.schemas.order import (
    AdminOrderPage,
    AdminOrderSummary,
    OrderCreate,
    OrderCreated,
    OrderDetail,
    OrderItemRead,
    OrderPage,
    OrderRead,
    OrderStatusUpdate,
    OrderSummary,
)
from app.schemas.payment import PaymentRequest, PaymentResponse
from app.services.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)

MAX_ORDER_NUMBER_ATTEMPTS = 5


class OrderTotals(NamedTuple):
    subtotal: float
    tax_amount: float
    shipping_amount: float
    discount_amount: float
    total_amount: float


def calculate_totals(
    subtotal: float,
    tax_rate: float,
    flat_shipping_fee: float,
    free_shipping_threshold: float,
    discount_amount: float = 0.0,
) -> OrderTotals:
    """
    Money breakdown for a cart subtotal, rounded to cents.

    Shipping is free only when the subtotal is strictly above the
    threshold.
    """
    subtotal = round(subtotal, 2)
    tax_amount = round(subtotal * tax_rate, 2)
    shipping_amount = 0.0 if subtotal > free_shipping_threshold else round(flat_shipping_fee, 2)
    total_amount = round(subtotal + tax_amount + shipping_amount - discount_amount, 2)
    return OrderTotals(
        subtotal=subtotal,
        tax_amount=tax_amount,
        shipping_amount=shipping_amount,
        discount_amount=round(discount_amount, 2),
        total_amount=total_amount,
    )


def generate_order_number() -> str:
    """ORD-<epoch ms>-<9 upper-case alphanumerics>"""
    alphabet = string.ascii_uppercase + string.digits
    suffix = "".join(secrets.choice(alphabet) for _ in range(9))
    return f"ORD-{int(time.time() * 1000)}-{suffix}"


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from cart
      - Validate cart items against products (stock, active)
      - Compute subtotal / tax / shipping / total
      - Deduct stock_quantity with a conditional update
      - Clear cart after success
      - Confirm payment through a PaymentGateway
      - Status updates (admin)
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        cart_repo: CartRepository,
        product_repo: ProductRepository,
        address_repo: AddressRepository,
        settings: Settings | None = None,
    ):
        self.order_repo = order_repo
        self.cart_repo = cart_repo
        self.product_repo = product_repo
        self.address_repo = address_repo
        self.settings = settings or get_settings()

    # -------- User-facing operations --------

    def create_order_from_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: OrderCreate,
    ) -> OrderCreated:
        """
        Convert the current user's cart into a pending Order.

        Steps:
          1. Check address references belong to the user.
          2. Load cart lines with their products; error if empty.
          3. Every line must reference an active product with enough stock.
          4. Compute totals from current product prices.
          5. Create Order row (status='pending', payment_status='pending').
          6. Create OrderItem snapshot rows.
          7. Deduct stock with one conditional update per line.
          8. Clear cart.
          9. Commit as a single transaction.

        Nothing is written when steps 1-3 fail; a failed step 7 rolls
        the whole order back.
        """
        # 1) Address ownership
        for field, address_id in (
            ("shipping", payload.shipping_address_id),
            ("billing", payload.billing_address_id),
        ):
            if address_id is not None and not self.address_repo.get_for_user(
                session, user_id, address_id
            ):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Invalid {field} address",
                )

        # 2) Load cart
        rows = self.cart_repo.list_with_products(session, user_id, only_active=False)
        if not rows:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        # 3) Validate each cart line vs product
        errors: list[dict[str, str]] = []
        for ci, product, _image in rows:
            if not product.is_active:
                errors.append(
                    {
                        "item_id": str(ci.id),
                        "product_id": str(ci.product_id),
                        "reason": f"{product.name} is no longer available",
                    }
                )
                continue

            if ci.quantity > product.stock_quantity:
                errors.append(
                    {
                        "item_id": str(ci.id),
                        "product_id": str(ci.product_id),
                        "reason": (
                            f"Insufficient stock for {product.name} "
                            f"(have {product.stock_quantity}, requested {ci.quantity})"
                        ),
                    }
                )

        if errors:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"message": "Cart validation failed", "items": errors},
            )

        # 4) Totals
        subtotal = sum(product.price * ci.quantity for ci, product, _ in rows)
        totals = calculate_totals(
            subtotal,
            tax_rate=self.settings.TAX_RATE,
            flat_shipping_fee=self.settings.FLAT_SHIPPING_FEE,
            free_shipping_threshold=self.settings.FREE_SHIPPING_THRESHOLD,
        )

        try:
            # 5) Create the Order
            order = Order(
                user_id=user_id,
                order_number=self._new_order_number(session),
                status="pending",
                subtotal=totals.subtotal,
                tax_amount=totals.tax_amount,
                shipping_amount=totals.shipping_amount,
                discount_amount=totals.discount_amount,
                total_amount=totals.total_amount,
                currency=self.settings.CURRENCY,
                payment_status="pending",
                payment_method=payload.payment_method,
                shipping_address_id=payload.shipping_address_id,
                billing_address_id=payload.billing_address_id,
                notes=payload.notes,
            )
            order = self.order_repo.create_order(session, order)

            # 6) Snapshot line items
            order_items = [
                OrderItem(
                    order_id=order.id,
                    product_id=product.id,
                    product_name=product.name,
                    product_sku=product.sku,
                    product_image_url=image,
                    quantity=ci.quantity,
                    unit_price=product.price,
                    total_price=round(product.price * ci.quantity, 2),
                )
                for ci, product, image in rows
            ]
            self.order_repo.create_items(session, order_items)

            # 7) Deduct stock_quantity, only if still available
            for ci, product, _ in rows:
                if not self.product_repo.decrement_stock(session, product.id, ci.quantity):
                    session.rollback()
                    logger.warning(
                        "Stock for product %s changed during checkout of user %s",
                        product.id,
                        user_id,
                    )
                    raise HTTPException(
                        status_code=status.HTTP_409_CONFLICT,
                        detail=f"Insufficient stock for {product.name}",
                    )

            # 8) Clear cart
            self.cart_repo.delete_for_user(session, user_id)

            # 9) Commit transaction
            session.commit()
        except HTTPException:
            raise
        except Exception:
            session.rollback()
            logger.exception("Order creation failed for user %s", user_id)
            raise

        logger.info(
            "Order %s created for user %s: %d lines, total %.2f",
            order.order_number,
            user_id,
            len(rows),
            totals.total_amount,
        )

        return OrderCreated(
            order_id=order.id,
            order_number=order.order_number,
            total_amount=totals.total_amount,
        )

    def process_payment(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: PaymentRequest,
        gateway: PaymentGateway,
    ) -> PaymentResponse:
        """
        Settle payment for one of the user's orders.

        The order must still be awaiting payment and not be cancelled.
        The gateway decides the outcome; exactly one outcome is written:
          - approved => payment_status 'completed', status 'confirmed'
          - declined => payment_status 'failed', status untouched
        """
        order = self.order_repo.get_pending_payment(session, user_id, payload.order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found or already processed",
            )

        result = gateway.charge(order, payload.payment_method, payload.payment_details)

        if result.approved:
            values = {
                "payment_status": "completed",
                "payment_method": payload.payment_method,
                "payment_id": result.payment_id,
                "status": "confirmed",
            }
        else:
            values = {"payment_status": "failed"}

        if not self.order_repo.settle_pending_payment(session, order.id, values):
            session.rollback()
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Payment already processed",
            )
        session.commit()

        if result.approved:
            logger.info("Payment %s completed for order %s", result.payment_id, order.order_number)
            return PaymentResponse(
                success=True,
                order_id=order.id,
                message="Payment processed successfully",
                payment_id=result.payment_id,
            )

        logger.info("Payment declined for order %s", order.order_number)
        return PaymentResponse(
            success=False,
            order_id=order.id,
            error=result.decline_reason or "Payment processing failed",
        )

    def list_user_orders(
        self,
        session: Session,
        user_id: uuid.UUID,
        page: int = 1,
        limit: int = 10,
    ) -> OrderPage:
        """
        List orders for the given user (without items).
        """
        rows = self.order_repo.list_for_user(session, user_id, (page - 1) * limit, limit)
        total = self.order_repo.count_for_user(session, user_id)
        return OrderPage(
            orders=[
                OrderSummary.model_validate(order, update={"item_count": int(count)})
                for order, count in rows
            ],
            pagination=build_pagination(page, limit, total),
        )

    def get_user_order(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> OrderDetail:
        """
        Get a single order for the user, including items.

        - 404 if order not found or does not belong to this user.
        """
        order = self.order_repo.get_for_user(session, user_id, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return self._build_order_detail(session, order)

    # -------- Admin operations --------

    def list_all_orders(
        self,
        session: Session,
        page: int = 1,
        limit: int = 20,
        status_filter: str | None = None,
    ) -> AdminOrderPage:
        rows = self.order_repo.list_all(session, (page - 1) * limit, limit, status_filter)
        total = self.order_repo.count_all(session, status_filter)
        return AdminOrderPage(
            orders=[
                AdminOrderSummary.model_validate(
                    order,
                    update={
                        "item_count": int(count),
                        "first_name": first_name,
                        "last_name": last_name,
                        "email": email,
                    },
                )
                for order, count, first_name, last_name, email in rows
            ],
            pagination=build_pagination(page, limit, total),
        )

    def get_order_admin(self, session: Session, order_id: uuid.UUID) -> OrderDetail:
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return self._build_order_detail(session, order)

    def update_status(
        self,
        session: Session,
        order_id: uuid.UUID,
        payload: OrderStatusUpdate,
    ) -> OrderRead:
        """
        Admin-only status update.

        Any of the six statuses is accepted (unknown values never reach
        here, the schema rejects them). 'shipped' and 'delivered' stamp
        their timestamps.
        """
        order = self.order_repo.get_by_id(session, order_id)
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        previous = order.status
        now = datetime.now(timezone.utc)
        order.status = payload.status
        if payload.status == "shipped":
            order.shipped_at = now
        elif payload.status == "delivered":
            order.delivered_at = now

        self.order_repo.update_order(session, order)
        session.commit()
        session.refresh(order)

        logger.info("Order %s status %s -> %s", order.order_number, previous, order.status)
        return OrderRead.model_validate(order)

    # -------- Helpers --------

    def _new_order_number(self, session: Session) -> str:
        for _ in range(MAX_ORDER_NUMBER_ATTEMPTS):
            candidate = generate_order_number()
            if not self.order_repo.order_number_exists(session, candidate):
                return candidate
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not allocate an order number, please retry",
        )

    def _build_order_detail(self, session: Session, order: Order) -> OrderDetail:
        """
        Compose OrderDetail from ORM models, resolving both addresses.
        """
        items = self.order_repo.list_items_for_order(session, order.id)

        addresses: dict[str, AddressRead | None] = {}
        for key, address_id in (
            ("shipping_address", order.shipping_address_id),
            ("billing_address", order.billing_address_id),
        ):
            address = (
                self.address_repo.get_by_id(session, address_id)
                if address_id is not None
                else None
            )
            addresses[key] = AddressRead.model_validate(address) if address else None

        return OrderDetail.model_validate(
            order,
            update={
                "items": [OrderItemRead.model_validate(it) for it in items],
                **addresses,
            },
        )
