"""
Authentication schemas for request/response validation.
"""

from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from trasporti.core.enums import UserRole


class LoginRequest(BaseModel):
    """Credentials; both are checked by the service so that a missing one is a 400."""
    username: Optional[str] = None
    password: Optional[str] = None


class UserInfo(BaseModel):
    username: str
    role: UserRole


class TokenResponse(BaseModel):
    """Schema for token response."""
    token: str
    user: UserInfo


class UserCreate(BaseModel):
    """Schema for user creation."""
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6)
    role: UserRole = UserRole.USER

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Username must not be blank")
        return v


class UserRead(BaseModel):
    """Schema for user response."""
    id: UUID
    username: str
    role: UserRole
    created_at: datetime
    last_login: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MeResponse(BaseModel):
    user: Dict[str, Any]
