# app/services/user_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from app.models.user import User
from app.repositories.user_repo import UserRepository
from app.schemas.common import build_pagination
from app.schemas.user import UserPage, UserRead, UserUpdate, UserRoleUpdate


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - enforce app rules (no email change here, role constraints)
      - orchestrate repository operations
      - map domain errors to HTTP errors
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- Self profile -----

    def update_me(
        self,
        session: Session,
        current_user: User,
        payload: UserUpdate,
    ) -> User:
        """
        Partial update for profile edits (names, phone).
        """
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(current_user, field, value)

        return self.repo.update(session, current_user)

    # ----- Admin operations -----

    def list_users(self, session: Session, page: int, limit: int) -> UserPage:
        """List users with pagination (admin only)."""
        users = self.repo.list(session, skip=(page - 1) * limit, limit=limit)
        return UserPage(
            users=[UserRead.model_validate(u) for u in users],
            pagination=build_pagination(page, limit, self.repo.count(session)),
        )

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Get a user by id (admin only).

        Raises:
            HTTPException(404): if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found",
            )
        return user

    def update_role(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: UserRoleUpdate,
    ) -> User:
        """
        Change user's role (admin only).

        Role validation is enforced by the schema (Literal).
        """
        user = self.get_user(session, user_id)
        user.role = payload.role
        return self.repo.update(session, user)
