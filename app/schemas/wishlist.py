# app/schemas/wishlist.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel


class WishlistItemCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    product_id: uuid.UUID


class WishlistItemRead(SQLModel):
    id: uuid.UUID
    product_id: uuid.UUID
    name: str
    price: float
    compare_price: float | None = None
    image_url: str | None = None
    created_at: datetime
