"""
CamManager - User Model
Accounts and location-scoped access
"""
import enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, enum.Enum):
    """User role enumeration."""
    ADMIN = "admin"
    USER = "user"


class User(BaseModel):
    """
    User account.

    Roles:
    - admin: sees and manages everything, allowed_locations is ignored
    - user: sees only devices whose location is in allowed_locations

    An empty allowed_locations means NO access for non-admins.
    Passwords are stored and compared as given.
    """
    model_config = ConfigDict(frozen=True, use_enum_values=True)

    id: str
    username: str
    password: str = ""
    full_name: str
    role: UserRole = UserRole.USER
    avatar: Optional[str] = None
    allowed_locations: List[str] = Field(default_factory=list)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
