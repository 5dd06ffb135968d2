# app/models/user.py
import uuid
from datetime import datetime, timezone

from sqlmodel import SQLModel, Field


class User(SQLModel, table=True):
    """
    Persistent customer / staff profile.

    Identity:
      - id: MUST match the "sub" claim of the access token

    Role:
      - "customer" | "admin"
      - guests are represented by the absence of a token.

    Passwords are not stored here; tokens are issued by the identity
    provider that shares JWT_SECRET with this service.
    """

    __tablename__ = "users"

    id: uuid.UUID = Field(
        primary_key=True,
        index=True,
        description="Matches the token 'sub' claim",
    )

    email: str = Field(
        unique=True,
        index=True,
    )

    first_name: str = Field(max_length=50)
    last_name: str = Field(default="", max_length=50)
    phone: str | None = Field(default=None, max_length=30)

    role: str = Field(
        default="customer",
        index=True,
        description="Application role: customer | admin",
    )

    is_active: bool = Field(default=True)

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation timestamp (UTC)",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
    )
