# app/repositories/address_repo.py
import uuid

from sqlalchemy import update
from sqlmodel import Session, select

from app.models.address import Address


class AddressRepository:
    """
    Data access layer for the per-user address book.
    """

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Address]:
        """Defaults first, then newest."""
        stmt = (
            select(Address)
            .where(Address.user_id == user_id)
            .order_by(Address.is_default.desc(), Address.created_at.desc())
        )
        return list(session.exec(stmt).all())

    def get_for_user(
        self, session: Session, user_id: uuid.UUID, address_id: uuid.UUID
    ) -> Address | None:
        stmt = select(Address).where(
            Address.id == address_id, Address.user_id == user_id
        )
        return session.exec(stmt).first()

    def get_by_id(self, session: Session, address_id: uuid.UUID) -> Address | None:
        return session.get(Address, address_id)

    def unset_defaults(
        self,
        session: Session,
        user_id: uuid.UUID,
        address_type: str,
        exclude_id: uuid.UUID | None = None,
    ) -> None:
        """Clear is_default for the user's addresses of one type (no commit)."""
        stmt = update(Address).where(
            Address.user_id == user_id,
            Address.type == address_type,
        )
        if exclude_id is not None:
            stmt = stmt.where(Address.id != exclude_id)
        session.exec(stmt.values(is_default=False))

    def save(self, session: Session, address: Address) -> Address:
        session.add(address)
        session.commit()
        session.refresh(address)
        return address

    def delete(self, session: Session, address: Address) -> None:
        session.delete(address)
        session.commit()
