# app/schemas/review.py
import uuid
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class ReviewCreate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    rating: int = Field(ge=1, le=5)
    title: str | None = Field(default=None, max_length=200)
    comment: str | None = None


class ReviewRead(SQLModel):
    """
    Review joined with the reviewer's display name.
    """

    id: uuid.UUID
    product_id: uuid.UUID
    user_id: uuid.UUID
    rating: int
    title: str | None
    comment: str | None
    is_verified: bool
    created_at: datetime
    first_name: str | None = None
    last_name: str | None = None
