# app/repositories/user_repo.py
import uuid
from datetime import datetime, timezone

from sqlalchemy import func
from sqlmodel import Session, select

from app.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def list(self, session: Session, skip: int = 0, limit: int = 50) -> list[User]:
        """
        Paginated user listing, newest first.
        """
        stmt = select(User).order_by(User.created_at.desc()).offset(skip).limit(limit)
        return list(session.exec(stmt).all())

    def count(self, session: Session) -> int:
        value = session.exec(select(func.count()).select_from(User)).one()
        return int(value or 0)

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        user.updated_at = datetime.now(timezone.utc)
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
