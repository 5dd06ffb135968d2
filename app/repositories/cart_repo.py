# app/repositories/cart_repo.py
import uuid
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete
from sqlmodel import Session, select

from app.models.cart import CartItem
from app.models.product import Product
from app.repositories.product_repo import primary_image_subquery


class CartRepository:

    # Get items for a user
    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[CartItem]:
        stmt = select(CartItem).where(CartItem.user_id == user_id)
        return list(session.exec(stmt).all())

    def list_with_products(
        self,
        session: Session,
        user_id: uuid.UUID,
        only_active: bool = True,
    ) -> list[Any]:
        """
        Cart lines joined with their product.

        Rows are (CartItem, Product, primary_image), newest first.
        """
        images = primary_image_subquery()
        stmt = (
            select(CartItem, Product, images.c.primary_image)
            .join(Product, Product.id == CartItem.product_id)
            .outerjoin(images, images.c.product_id == Product.id)
            .where(CartItem.user_id == user_id)
            .order_by(CartItem.created_at.desc())
        )
        if only_active:
            stmt = stmt.where(Product.is_active == True)  # noqa: E712
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.user_id == user_id, CartItem.product_id == product_id
        )
        return session.exec(stmt).first()

    def get_for_user(
        self, session: Session, user_id: uuid.UUID, item_id: uuid.UUID
    ) -> CartItem | None:
        stmt = select(CartItem).where(
            CartItem.id == item_id, CartItem.user_id == user_id
        )
        return session.exec(stmt).first()

    # CRUD
    def create(self, session: Session, item: CartItem) -> CartItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def update(self, session: Session, item: CartItem) -> CartItem:
        item.updated_at = datetime.now(timezone.utc)
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: CartItem) -> None:
        session.delete(item)
        session.commit()

    def clear_user_cart(self, session: Session, user_id: uuid.UUID) -> None:
        self.delete_for_user(session, user_id)
        session.commit()

    def delete_for_user(self, session: Session, user_id: uuid.UUID) -> int:
        """
        Remove every cart line of a user without committing
        (checkout owns the transaction).
        """
        stmt = delete(CartItem).where(CartItem.user_id == user_id)
        return session.exec(stmt).rowcount
