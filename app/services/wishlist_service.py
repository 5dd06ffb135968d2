# app/services/wishlist_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.cart import WishlistItem
from app.repositories.product_repo import ProductRepository
from app.repositories.wishlist_repo import WishlistRepository
from app.schemas.wishlist import WishlistItemCreate, WishlistItemRead


class WishlistService:

    def __init__(self, repo: WishlistRepository, product_repo: ProductRepository):
        self.repo = repo
        self.product_repo = product_repo

    def list_wishlist(self, session: Session, user_id: uuid.UUID) -> list[WishlistItemRead]:
        return [
            WishlistItemRead(
                id=item.id,
                product_id=product.id,
                name=product.name,
                price=product.price,
                compare_price=product.compare_price,
                image_url=image,
                created_at=item.created_at,
            )
            for item, product, image in self.repo.list_for_user(session, user_id)
        ]

    def add(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: WishlistItemCreate,
    ) -> list[WishlistItemRead]:
        product = self.product_repo.get_by_id(session, payload.product_id)
        if not product or not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )

        if self.repo.get_item(session, user_id, payload.product_id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Product already in wishlist",
            )

        self.repo.create(session, WishlistItem(user_id=user_id, product_id=product.id))
        return self.list_wishlist(session, user_id)

    def remove(self, session: Session, user_id: uuid.UUID, product_id: uuid.UUID) -> None:
        item = self.repo.get_item(session, user_id, product_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found in wishlist",
            )
        self.repo.delete(session, item)
