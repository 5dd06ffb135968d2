# app/services/category_service.py
import uuid
from typing import Any

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.product import Category
from app.repositories.category_repo import CategoryRepository
from app.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate


class CategoryService:
    """
    Business logic for catalog categories (unique names, soft delete).
    """

    def __init__(self, repo: CategoryRepository):
        self.repo = repo

    @staticmethod
    def _to_read(row: Any) -> CategoryRead:
        category, product_count = row
        return CategoryRead.model_validate(
            category, update={"product_count": int(product_count or 0)}
        )

    def _ensure_unique_name(
        self,
        session: Session,
        name: str,
        category_id: uuid.UUID | None = None,
    ) -> None:
        existing = self.repo.get_by_name(session, name)
        if existing and existing.id != category_id:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Category name already exists",
            )

    def _get_category(self, session: Session, category_id: uuid.UUID) -> Category:
        category = self.repo.get_by_id(session, category_id)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return category

    def list_categories(self, session: Session) -> list[CategoryRead]:
        return [self._to_read(row) for row in self.repo.list_active(session)]

    def get_category(self, session: Session, category_id: uuid.UUID) -> CategoryRead:
        row = self.repo.get_active(session, category_id)
        if row is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Category not found",
            )
        return self._to_read(row)

    def create_category(self, session: Session, payload: CategoryCreate) -> CategoryRead:
        self._ensure_unique_name(session, payload.name)
        if payload.parent_id is not None:
            self._get_category(session, payload.parent_id)

        category = self.repo.create(session, Category(**payload.model_dump()))
        return CategoryRead.model_validate(category)

    def update_category(
        self,
        session: Session,
        category_id: uuid.UUID,
        payload: CategoryUpdate,
    ) -> CategoryRead:
        category = self._get_category(session, category_id)
        changes = payload.model_dump(exclude_unset=True)

        if changes.get("name") is not None:
            self._ensure_unique_name(session, changes["name"], category.id)
        if changes.get("parent_id") is not None:
            if changes["parent_id"] == category.id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A category cannot be its own parent",
                )
            self._get_category(session, changes["parent_id"])

        for field, value in changes.items():
            setattr(category, field, value)

        return CategoryRead.model_validate(self.repo.update(session, category))

    def delete_category(self, session: Session, category_id: uuid.UUID) -> None:
        category = self._get_category(session, category_id)
        category.is_active = False
        self.repo.update(session, category)
