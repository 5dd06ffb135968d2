# app/repositories/order_repo.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, or_, update
from sqlmodel import Session, select

from app.models.order import Order, OrderItem
from app.models.user import User


def _item_count_subquery():
    return (
        select(
            OrderItem.order_id.label("order_id"),
            func.count(OrderItem.id).label("item_count"),
        )
        .group_by(OrderItem.order_id)
        .subquery()
    )


class OrderRepository:
    """
    Data access layer for orders and order_items.

    NOTE:
      - No commits here; order creation and payment are multi-step
        transactions. The service is responsible for calling
        session.commit() / session.rollback().
    """

    # ---- Orders ----

    def list_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 10,
    ) -> list[Any]:
        """
        Rows are (Order, item_count), newest first.
        """
        counts = _item_count_subquery()
        stmt = (
            select(Order, func.coalesce(counts.c.item_count, 0))
            .outerjoin(counts, counts.c.order_id == Order.id)
            .where(Order.user_id == user_id)
            .order_by(Order.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def count_for_user(self, session: Session, user_id: uuid.UUID) -> int:
        stmt = select(func.count()).select_from(Order).where(Order.user_id == user_id)
        return int(session.exec(stmt).one() or 0)

    def list_all(
        self,
        session: Session,
        skip: int = 0,
        limit: int = 20,
        status: str | None = None,
    ) -> list[Any]:
        """
        Admin listing. Rows are (Order, item_count, first_name,
        last_name, email).
        """
        counts = _item_count_subquery()
        stmt = (
            select(
                Order,
                func.coalesce(counts.c.item_count, 0),
                User.first_name,
                User.last_name,
                User.email,
            )
            .join(User, User.id == Order.user_id)
            .outerjoin(counts, counts.c.order_id == Order.id)
        )
        if status is not None:
            stmt = stmt.where(Order.status == status)
        stmt = stmt.order_by(Order.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count_all(self, session: Session, status: str | None = None) -> int:
        stmt = select(func.count()).select_from(Order)
        if status is not None:
            stmt = stmt.where(Order.status == status)
        return int(session.exec(stmt).one() or 0)

    def get_by_id(self, session: Session, order_id: uuid.UUID) -> Order | None:
        return session.get(Order, order_id)

    def get_for_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> Order | None:
        stmt = select(Order).where(Order.id == order_id, Order.user_id == user_id)
        return session.exec(stmt).first()

    def get_pending_payment(
        self,
        session: Session,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> Order | None:
        stmt = select(Order).where(
            Order.id == order_id,
            Order.user_id == user_id,
            Order.payment_status == "pending",
            Order.status != "cancelled",
        )
        return session.exec(stmt).first()

    def order_number_exists(self, session: Session, order_number: str) -> bool:
        stmt = select(Order.id).where(Order.order_number == order_number)
        return session.exec(stmt).first() is not None

    def address_in_use(self, session: Session, address_id: uuid.UUID) -> bool:
        stmt = select(Order.id).where(
            or_(
                Order.shipping_address_id == address_id,
                Order.billing_address_id == address_id,
            )
        )
        return session.exec(stmt).first() is not None

    def create_order(self, session: Session, order: Order) -> Order:
        """
        Insert an Order without committing, but ensure id is populated.
        """
        session.add(order)
        session.flush()  # Assign PK
        session.refresh(order)
        return order

    def update_order(self, session: Session, order: Order) -> Order:
        order.updated_at = datetime.now(timezone.utc)
        session.add(order)
        session.flush()
        session.refresh(order)
        return order

    def settle_pending_payment(
        self,
        session: Session,
        order_id: uuid.UUID,
        values: dict[str, Any],
    ) -> bool:
        """
        Write a payment outcome only if the order is still awaiting one
        and has not been cancelled.

        Returns False when another request already recorded an outcome
        or the order was cancelled in the meantime.
        """
        stmt = (
            update(Order)
            .where(
                Order.id == order_id,
                Order.payment_status == "pending",
                Order.status != "cancelled",
            )
            .values(updated_at=datetime.now(timezone.utc), **values)
        )
        result = session.exec(stmt)
        return result.rowcount == 1

    # ---- Order items ----

    def list_items_for_order(
        self,
        session: Session,
        order_id: uuid.UUID,
    ) -> list[OrderItem]:
        stmt = (
            select(OrderItem)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.created_at)
        )
        return list(session.exec(stmt).all())

    def create_items(
        self,
        session: Session,
        items: list[OrderItem],
    ) -> list[OrderItem]:
        session.add_all(items)
        session.flush()
        for item in items:
            session.refresh(item)
        return items
