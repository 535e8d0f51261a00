"""
Authentication service for user management and authentication.
"""

import secrets
from datetime import timedelta
from typing import Any, Dict, Optional

from sqlmodel import Session

from trasporti.core.config import Settings, get_settings
from trasporti.core.enums import UserRole
from trasporti.core.exceptions import ConflictError, UnauthorizedError
from trasporti.core.security import create_access_token, get_password_hash, verify_password
from trasporti.infrastructure.db.models import User
from trasporti.infrastructure.db.models.base import utcnow
from trasporti.infrastructure.db.repositories import UserRepository
from trasporti.schemas.auth import UserCreate
from .base import BaseService


class AuthService(BaseService):
    """Service for handling authentication operations."""

    def __init__(self, db_session: Session, settings: Optional[Settings] = None):
        super().__init__(db_session)
        self.settings = settings or get_settings()
        self.users = UserRepository(db_session)

    def get_service_name(self) -> str:
        return "AuthService"

    def _is_env_admin(self, username: str, password: str) -> bool:
        admin = self.settings.admin
        if not admin.admin_user or not admin.admin_pass:
            return False
        return secrets.compare_digest(username.encode(), admin.admin_user.encode()) and secrets.compare_digest(
            password.encode(), admin.admin_pass.encode()
        )

    def issue_token(self, username: str, role: UserRole, user_id: Optional[str] = None) -> Dict[str, Any]:
        security = self.settings.security
        minutes = (
            security.admin_token_expire_minutes
            if role == UserRole.ADMIN
            else security.user_token_expire_minutes
        )
        claims = {"sub": username, "role": role.value}
        if user_id:
            claims["id"] = user_id

        token = create_access_token(claims, expires_delta=timedelta(minutes=minutes), settings=security)
        return {"token": token, "user": {"username": username, "role": role.value}}

    async def login(self, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """
        Authenticate against the configured admin credentials, then the users table.

        Raises:
            BadRequestError: username or password missing
            UnauthorizedError: wrong credentials
        """
        self.validate_input({"username": username, "password": password}, ["username", "password"])
        self.log_operation("login", {"username": username})

        if self._is_env_admin(username, password):
            return self.issue_token(username, UserRole.ADMIN)

        user = await self.users.get_by_username(username)
        if user is None or not verify_password(password, user.password):
            self.logger.warning(f"Failed login for {username}")
            raise UnauthorizedError("Invalid credentials")

        user.last_login = utcnow()
        await self.users.save(user)

        return self.issue_token(user.username, UserRole(user.role), user_id=str(user.id))

    async def create_user(self, user_data: UserCreate) -> User:
        """Create a new user with a hashed password."""
        self.log_operation("create_user", {"username": user_data.username, "role": user_data.role.value})

        if await self.users.get_by_username(user_data.username):
            raise ConflictError("Username already exists", resource="User")

        return await self.users.create(
            User(
                username=user_data.username,
                password=get_password_hash(user_data.password),
                role=user_data.role,
            )
        )

    async def seed_master(self) -> Optional[User]:
        """
        Create the admin user from MASTER_USERNAME / MASTER_PASSWORD.

        Returns the existing user untouched when it is already present, and
        None when the variables are not set.
        """
        admin = self.settings.admin
        if not admin.master_username or not admin.master_password:
            self.logger.warning("MASTER_USERNAME / MASTER_PASSWORD not set, nothing to seed")
            return None

        existing = await self.users.get_by_username(admin.master_username)
        if existing:
            self.logger.info(f"Master user {admin.master_username} already exists")
            return existing

        return await self.create_user(
            UserCreate(
                username=admin.master_username,
                password=admin.master_password,
                role=UserRole.ADMIN,
            )
        )
