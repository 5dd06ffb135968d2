# app/routers/users.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

from app.core.auth import require_auth, require_admin, require_customer
from app.database import get_session
from app.models.user import User
from app.repositories.address_repo import AddressRepository
from app.repositories.order_repo import OrderRepository
from app.repositories.product_repo import ProductRepository
from app.repositories.user_repo import UserRepository
from app.repositories.wishlist_repo import WishlistRepository
from app.schemas.address import AddressCreate, AddressRead, AddressUpdate
from app.schemas.common import Message
from app.schemas.user import UserPage, UserRead, UserUpdate, UserRoleUpdate
from app.schemas.wishlist import WishlistItemCreate, WishlistItemRead
from app.services.address_service import AddressService
from app.services.user_service import UserService
from app.services.wishlist_service import WishlistService

router = APIRouter(prefix="/users", tags=["Users"])

service = UserService(UserRepository())
address_service = AddressService(AddressRepository(), OrderRepository())
wishlist_service = WishlistService(WishlistRepository(), ProductRepository())


# -------- Self profile --------


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(require_auth)):
    """
    Return the authenticated user's profile.

    The profile row is auto-created on the first authenticated request.
    """
    return current_user


@router.patch("/me", response_model=UserRead)
def update_me(
    payload: UserUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Update the authenticated user's profile (partial update).

    Editable: first_name, last_name, phone.
    """
    return service.update_me(session, current_user, payload)


# -------- Addresses --------


@router.get("/me/addresses", response_model=list[AddressRead])
def list_my_addresses(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """Default addresses first, then newest."""
    return address_service.list_addresses(session, current_user.id)


@router.post(
    "/me/addresses",
    response_model=AddressRead,
    status_code=status.HTTP_201_CREATED,
)
def add_my_address(
    payload: AddressCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return address_service.add_address(session, current_user.id, payload)


@router.patch("/me/addresses/{address_id}", response_model=AddressRead)
def update_my_address(
    address_id: uuid.UUID,
    payload: AddressUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    return address_service.update_address(session, current_user.id, address_id, payload)


@router.delete("/me/addresses/{address_id}", response_model=Message)
def delete_my_address(
    address_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_auth),
):
    """
    Delete an address. Addresses referenced by an order are kept (409).
    """
    address_service.delete_address(session, current_user.id, address_id)
    return Message(message="Address deleted")


# -------- Wishlist --------


@router.get("/me/wishlist", response_model=list[WishlistItemRead])
def list_my_wishlist(
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    return wishlist_service.list_wishlist(session, current_user.id)


@router.post(
    "/me/wishlist",
    response_model=list[WishlistItemRead],
    status_code=status.HTTP_201_CREATED,
)
def add_to_wishlist(
    payload: WishlistItemCreate,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    """
    Add a product to the wishlist and return the updated list.
    """
    return wishlist_service.add(session, current_user.id, payload)


@router.delete("/me/wishlist/{product_id}", response_model=Message)
def remove_from_wishlist(
    product_id: uuid.UUID,
    session: Session = Depends(get_session),
    current_user: User = Depends(require_customer),
):
    wishlist_service.remove(session, current_user.id, product_id)
    return Message(message="Removed from wishlist")


# -------- Admin endpoints --------


@router.get(
    "",
    response_model=UserPage,
    dependencies=[Depends(require_admin)],
)
def list_users(
    session: Session = Depends(get_session),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
):
    """
    List all users (admin only).
    """
    return service.list_users(session, page, limit)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def get_user(
    user_id: uuid.UUID,
    session: Session = Depends(get_session),
):
    """
    Get a specific user by id (admin only).
    """
    return service.get_user(session, user_id)


@router.patch(
    "/{user_id}/role",
    response_model=UserRead,
    dependencies=[Depends(require_admin)],
)
def change_role(
    user_id: uuid.UUID,
    payload: UserRoleUpdate,
    session: Session = Depends(get_session),
):
    """
    Update a user's role (admin only).

    Allowed roles: customer, admin.
    Guests are anonymous and don't have rows.
    """
    return service.update_role(session, user_id, payload)
