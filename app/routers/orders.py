# app/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_admin, require_customer
from app.database import get_session
from app.models.user import User
from app.repositories.address_repo import AddressRepository
from app.repositories.cart_repo import CartRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.order import (
    AdminOrderPage,
    OrderCreate,
    OrderCreated,
    OrderDetail,
    OrderPage,
    OrderRead,
    OrderStatus,
    OrderStatusUpdate,
)
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
cart_repo = CartRepository()
product_repo = ProductRepository()
address_repo = AddressRepository()
service = OrderService(order_repo, cart_repo, product_repo, address_repo)


# -------- User-facing endpoints --------


@router.post(
    "",
    response_model=OrderCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    payload: OrderCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Create a pending order from the current user's cart.

    Stock is reserved and the cart is emptied in the same transaction.
    Payment is confirmed separately through /payments/process.
    """
    return service.create_order_from_cart(session, current_user.id, payload)


@router.get("", response_model=OrderPage)
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """
    List the authenticated user's orders (without items), newest first.
    """
    return service.list_user_orders(session, current_user.id, page, limit)


# -------- Admin endpoints --------
# Declared before /{order_id} so "admin" is not parsed as an id.


@router.get(
    "/admin/all",
    response_model=AdminOrderPage,
    dependencies=[Depends(require_admin)],
)
def list_all_orders(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status_filter: OrderStatus | None = Query(None, alias="status"),
):
    """
    List all orders (admin only), optionally filtered by status.
    """
    return service.list_all_orders(session, page, limit, status_filter)


@router.get(
    "/admin/{order_id}",
    response_model=OrderDetail,
    dependencies=[Depends(require_admin)],
)
def get_order_admin(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Any customer's order with items and addresses (admin only).
    """
    return service.get_order_admin(session, order_id)


@router.patch(
    "/{order_id}/status",
    response_model=OrderRead,
    dependencies=[Depends(require_admin)],
)
def update_order_status(
    order_id: uuid.UUID,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (admin only).

    Unknown statuses are rejected with 422.
    """
    return service.update_status(session, order_id, payload)


@router.get("/{order_id}", response_model=OrderDetail)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Get a single order (with items and addresses) belonging to the
    current user.
    """
    return service.get_user_order(session, current_user.id, order_id)
