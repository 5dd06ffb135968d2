# app/services/cart_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.cart import CartItem
from app.models.product import Product
from app.repositories.cart_repo import CartRepository
from app.repositories.product_repo import ProductRepository
from app.schemas.cart import (
    CartItemCreate,
    CartItemUpdate,
    CartItemRead,
    CartSummary,
)


class CartService:
    """
    Business logic for cart operations.

    Responsibilities:
      - validate product existence and active flag
      - enforce quantity <= stock_quantity (merged quantity on re-add)
      - price lines from the live product row
      - compute line totals and cart totals
    """

    def __init__(self, cart_repo: CartRepository, product_repo: ProductRepository):
        self.cart_repo = cart_repo
        self.product_repo = product_repo

    # ---- internal helpers ----

    def _get_valid_product(self, session: Session, product_id: uuid.UUID) -> Product:
        product = self.product_repo.get_by_id(session, product_id)
        if not product or not product.is_active:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return product

    def _get_own_item(
        self, session: Session, user_id: uuid.UUID, item_id: uuid.UUID
    ) -> CartItem:
        item = self.cart_repo.get_for_user(session, user_id, item_id)
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Cart item not found",
            )
        return item

    # ---- public operations ----

    def get_cart_summary(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        """
        Return full cart summary:
          - list of CartItemRead (with line_total)
          - item_count (sum of quantities)
          - total

        Lines whose product has been deactivated are listed with
        is_available=False and do not count towards the totals.
        """
        rows = self.cart_repo.list_with_products(session, user_id, only_active=False)

        item_reads: list[CartItemRead] = []
        item_count = 0
        total = 0.0

        for item, product, image in rows:
            line_total = round(item.quantity * product.price, 2)
            if product.is_active:
                item_count += item.quantity
                total += line_total

            item_reads.append(
                CartItemRead(
                    id=item.id,
                    product_id=item.product_id,
                    quantity=item.quantity,
                    name=product.name,
                    price=product.price,
                    stock_quantity=product.stock_quantity,
                    image_url=image,
                    line_total=line_total,
                    is_available=product.is_active,
                    created_at=item.created_at,
                )
            )

        return CartSummary(
            items=item_reads,
            total=round(total, 2),
            item_count=item_count,
        )

    def add_to_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: CartItemCreate,
    ) -> CartSummary:
        """
        Add a product to the user's cart.

        Rules:
          - product must exist and be active
          - quantity + existing_quantity <= stock_quantity
        """
        product = self._get_valid_product(session, payload.product_id)

        if payload.quantity > product.stock_quantity:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Insufficient stock",
            )

        existing = self.cart_repo.get_item(session, user_id, payload.product_id)

        if existing:
            new_qty = existing.quantity + payload.quantity
            if new_qty > product.stock_quantity:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Insufficient stock",
                )
            existing.quantity = new_qty
            self.cart_repo.update(session, existing)
        else:
            item = CartItem(
                user_id=user_id,
                product_id=payload.product_id,
                quantity=payload.quantity,
            )
            self.cart_repo.create(session, item)

        return self.get_cart_summary(session, user_id)

    def update_quantity(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
        payload: CartItemUpdate,
    ) -> CartSummary:
        """
        Set the quantity of a cart line.

        If quantity exceeds stock_quantity => 400.
        """
        item = self._get_own_item(session, user_id, item_id)
        product = self._get_valid_product(session, item.product_id)

        if payload.quantity > product.stock_quantity:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Insufficient stock",
            )

        item.quantity = payload.quantity
        self.cart_repo.update(session, item)

        return self.get_cart_summary(session, user_id)

    def remove_item(
        self,
        session: Session,
        user_id: uuid.UUID,
        item_id: uuid.UUID,
    ) -> CartSummary:
        item = self._get_own_item(session, user_id, item_id)
        self.cart_repo.delete(session, item)
        return self.get_cart_summary(session, user_id)

    def clear_cart(
        self,
        session: Session,
        user_id: uuid.UUID,
    ) -> CartSummary:
        """
        Clear all items from the cart and return an empty summary.
        """
        self.cart_repo.clear_user_cart(session, user_id)
        return CartSummary(items=[], total=0.0, item_count=0)
