"""
CamManager - Account Pydantic Schemas
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from cammanager.models.user import User, UserRole


class LoginRequest(BaseModel):
    username: str
    password: str


class PasswordChange(BaseModel):
    """Schema for changing the current user's password."""
    new_password: str
    confirm_password: Optional[str] = None


class UserSave(BaseModel):
    """
    Schema for creating or updating an account (admin only).

    A None/blank password on update keeps the current one.
    """
    id: Optional[str] = None
    username: str = ""
    password: Optional[str] = None
    full_name: str = ""
    role: UserRole = UserRole.USER
    avatar: Optional[str] = None
    allowed_locations: List[str] = Field(default_factory=list)


class UserResponse(BaseModel):
    """User response without the password."""
    id: str
    username: str
    full_name: str
    role: str
    avatar: Optional[str] = None
    allowed_locations: List[str] = []

    @classmethod
    def build(cls, user: User) -> "UserResponse":
        return cls(**user.model_dump(exclude={"password"}))
