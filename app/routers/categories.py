# app/routers/categories.py
import uuid

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.core.auth import require_admin
from app.database import get_session
from app.repositories.category_repo import CategoryRepository
from app.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from app.schemas.common import Message
from app.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["Categories"])

service = CategoryService(CategoryRepository())


# -------- Public endpoints --------


@router.get("", response_model=list[CategoryRead])
def list_categories(session: Session = Depends(get_session)):
    """
    Active categories ordered by name, each with its active product count.
    """
    return service.list_categories(session)


@router.get("/{category_id}", response_model=CategoryRead)
def get_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    return service.get_category(session, category_id)


# -------- Admin endpoints --------


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_category(
    payload: CategoryCreate,
    session: Session = Depends(get_session),
):
    return service.create_category(session, payload)


@router.patch(
    "/{category_id}",
    response_model=CategoryRead,
    dependencies=[Depends(require_admin)],
)
def update_category(
    category_id: uuid.UUID,
    payload: CategoryUpdate,
    session: Session = Depends(get_session),
):
    return service.update_category(session, category_id, payload)


@router.delete(
    "/{category_id}",
    response_model=Message,
    dependencies=[Depends(require_admin)],
)
def delete_category(
    category_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Soft delete: the category is hidden from the catalog.
    """
    service.delete_category(session, category_id)
    return Message(message="Category deleted")
