# app/repositories/wishlist_repo.py
import uuid
from typing import Any

from sqlmodel import Session, select

from app.models.cart import WishlistItem
from app.models.product import Product
from app.repositories.product_repo import primary_image_subquery


class WishlistRepository:

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Any]:
        """
        Rows are (WishlistItem, Product, primary_image) for active products.
        """
        images = primary_image_subquery()
        stmt = (
            select(WishlistItem, Product, images.c.primary_image)
            .join(Product, Product.id == WishlistItem.product_id)
            .outerjoin(images, images.c.product_id == Product.id)
            .where(
                WishlistItem.user_id == user_id,
                Product.is_active == True,  # noqa: E712
            )
            .order_by(WishlistItem.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def get_item(
        self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID
    ) -> WishlistItem | None:
        stmt = select(WishlistItem).where(
            WishlistItem.user_id == user_id,
            WishlistItem.product_id == product_id,
        )
        return session.exec(stmt).first()

    def create(self, session: Session, item: WishlistItem) -> WishlistItem:
        session.add(item)
        session.commit()
        session.refresh(item)
        return item

    def delete(self, session: Session, item: WishlistItem) -> None:
        session.delete(item)
        session.commit()
