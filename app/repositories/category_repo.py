# app/repositories/category_repo.py
import uuid
from typing import Any

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.product import Category, Product


class CategoryRepository:
    """
    Data access layer for Category.
    """

    @staticmethod
    def _with_product_count():
        counts = (
            select(
                Product.category_id.label("category_id"),
                func.count(Product.id).label("product_count"),
            )
            .where(Product.is_active == True)  # noqa: E712
            .group_by(Product.category_id)
            .subquery()
        )
        return (
            select(Category, func.coalesce(counts.c.product_count, 0))
            .outerjoin(counts, counts.c.category_id == Category.id)
            .where(Category.is_active == True)  # noqa: E712
        )

    def list_active(self, session: Session) -> list[Any]:
        """
        Active categories with their active product count, by name.
        Rows are (Category, product_count).
        """
        stmt = self._with_product_count().order_by(Category.name)
        return list(session.exec(stmt).all())

    def get_active(self, session: Session, category_id: uuid.UUID) -> Any | None:
        stmt = self._with_product_count().where(Category.id == category_id)
        return session.exec(stmt).first()

    def get_by_id(self, session: Session, category_id: uuid.UUID) -> Category | None:
        return session.get(Category, category_id)

    def get_by_name(self, session: Session, name: str) -> Category | None:
        stmt = select(Category).where(func.lower(Category.name) == name.lower())
        return session.exec(stmt).first()

    def create(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category

    def update(self, session: Session, category: Category) -> Category:
        session.add(category)
        session.commit()
        session.refresh(category)
        return category
