import logging
from typing import Optional

from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError

from .base import BaseRepository
from ..models.user import User
from ....core.exceptions import DatabaseError

logger = logging.getLogger(__name__)


class UserRepository(BaseRepository[User]):
    """
    User repository with user-specific operations.
    """

    def __init__(self, session: Session):
        super().__init__(User, session)

    async def get_by_username(self, username: str) -> Optional[User]:
        """
        Get user by username.

        Args:
            username: Username

        Returns:
            User instance or None if not found
        """
        try:
            statement = select(User).where(User.username == username)
            return self.session.exec(statement).first()

        except SQLAlchemyError as e:
            logger.error(f"Failed to get user by username {username}: {e}")
            raise DatabaseError("Failed to get user", operation="get_by_username") from e
