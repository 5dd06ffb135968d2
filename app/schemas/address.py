# app/schemas/address.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel

AddressType = Literal["shipping", "billing"]


class AddressCreate(SQLModel):
    """
    Payload for adding an address to the book.
    """

    model_config = ConfigDict(extra="forbid")

    type: AddressType = "shipping"
    first_name: str
    last_name: str
    company: str | None = None
    address_line_1: str
    address_line_2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str
    phone: str | None = None
    is_default: bool = False

    @field_validator(
        "first_name",
        "last_name",
        "address_line_1",
        "city",
        "state",
        "postal_code",
        "country",
    )
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class AddressUpdate(SQLModel):
    """
    Partial update; omitted fields are left untouched.
    """

    model_config = ConfigDict(extra="forbid")

    type: AddressType | None = None
    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    address_line_1: str | None = None
    address_line_2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    country: str | None = None
    phone: str | None = None
    is_default: bool | None = None

    @field_validator(
        "first_name",
        "last_name",
        "address_line_1",
        "city",
        "state",
        "postal_code",
        "country",
    )
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class AddressRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    type: AddressType
    first_name: str
    last_name: str
    company: str | None
    address_line_1: str
    address_line_2: str | None
    city: str
    state: str
    postal_code: str
    country: str
    phone: str | None
    is_default: bool
    created_at: datetime
