# app/services/address_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.address import Address
from app.repositories.address_repo import AddressRepository
from app.repositories.order_repo import OrderRepository
from app.schemas.address import AddressCreate, AddressUpdate


class AddressService:
    """
    Address book rules:
      - one default address per (user, type)
      - addresses referenced by an order cannot be deleted
    """

    def __init__(self, repo: AddressRepository, order_repo: OrderRepository):
        self.repo = repo
        self.order_repo = order_repo

    def _get_own(
        self, session: Session, user_id: uuid.UUID, address_id: uuid.UUID
    ) -> Address:
        address = self.repo.get_for_user(session, user_id, address_id)
        if not address:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Address not found",
            )
        return address

    def list_addresses(self, session: Session, user_id: uuid.UUID) -> list[Address]:
        return self.repo.list_for_user(session, user_id)

    def add_address(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: AddressCreate,
    ) -> Address:
        if payload.is_default:
            self.repo.unset_defaults(session, user_id, payload.type)

        address = Address(user_id=user_id, **payload.model_dump())
        return self.repo.save(session, address)

    def update_address(
        self,
        session: Session,
        user_id: uuid.UUID,
        address_id: uuid.UUID,
        payload: AddressUpdate,
    ) -> Address:
        address = self._get_own(session, user_id, address_id)

        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(address, field, value)

        if address.is_default:
            self.repo.unset_defaults(session, user_id, address.type, exclude_id=address.id)

        return self.repo.save(session, address)

    def delete_address(
        self,
        session: Session,
        user_id: uuid.UUID,
        address_id: uuid.UUID,
    ) -> None:
        address = self._get_own(session, user_id, address_id)
        if self.order_repo.address_in_use(session, address.id):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Address is used by an existing order",
            )
        self.repo.delete(session, address)
