# app/repositories/review_repo.py
import uuid
from typing import Any

from sqlalchemy import func, or_
from sqlmodel import Session, select

from app.models.order import Order, OrderItem
from app.models.product import Review
from app.models.user import User


class ReviewRepository:

    def list_for_product(
        self,
        session: Session,
        product_id: uuid.UUID,
        limit: int = 10,
    ) -> list[Any]:
        """
        Latest approved reviews; rows are (Review, first_name, last_name).
        """
        stmt = (
            select(Review, User.first_name, User.last_name)
            .join(User, User.id == Review.user_id)
            .where(
                Review.product_id == product_id,
                Review.is_approved == True,  # noqa: E712
            )
            .order_by(Review.created_at.desc())
            .limit(limit)
        )
        return list(session.exec(stmt).all())

    def get_for_user(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> Review | None:
        stmt = select(Review).where(
            Review.user_id == user_id, Review.product_id == product_id
        )
        return session.exec(stmt).first()

    def has_paid_order_with(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> bool:
        stmt = (
            select(func.count())
            .select_from(OrderItem)
            .join(Order, Order.id == OrderItem.order_id)
            .where(
                Order.user_id == user_id,
                OrderItem.product_id == product_id,
                or_(Order.payment_status == "completed", Order.status == "delivered"),
            )
        )
        return int(session.exec(stmt).one() or 0) > 0

    def create(self, session: Session, review: Review) -> Review:
        session.add(review)
        session.commit()
        session.refresh(review)
        return review
