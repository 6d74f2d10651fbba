"""User schema definitions.

This module defines the User data model and the request/response bodies of the
auth, users, profile and moderation routes.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

import pytz
from pydantic import BaseModel, Field

UserRoleType = Literal["admin", "moderator", "user", "guest"]
UserStatusType = Literal["active", "inactive", "suspended", "pending"]


def _now_iso() -> str:
    return datetime.now(pytz.utc).isoformat()


class User(BaseModel):
    """structure of a stored user profile"""
    user_id: str = Field(
        description="The unique identifier for the user.",
        default_factory=lambda: str(uuid.uuid4()),
    )
    email: str = Field(description="Lowercased email address, unique per user.")
    password_hash: Optional[str] = Field(
        default=None,
        description="bcrypt hash; None until the user registers a password.",
    )
    role: UserRoleType = "user"
    status: UserStatusType = "active"
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    last_login_at: Optional[str] = None
    login_count: int = 0
    created_at: str = Field(default_factory=_now_iso)
    updated_at: str = Field(default_factory=_now_iso)
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    def public_dict(self) -> Dict[str, Any]:
        """Return the user as a dict without the password hash."""
        data = self.model_dump()
        data.pop("password_hash", None)
        return data


class UserProfile(BaseModel):
    """User profile as returned by the API."""
    user_id: str
    email: str
    role: UserRoleType
    status: UserStatusType
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    last_login_at: Optional[str] = None
    login_count: int = 0
    created_at: str
    updated_at: str
    created_by: Optional[str] = None
    updated_by: Optional[str] = None


class UserContext(BaseModel):
    """Identity attached to a request by the route guard."""
    user_id: str
    email: str
    role: UserRoleType = "user"
    status: UserStatusType = "active"
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    permissions: List[str] = Field(default_factory=list)
    is_active: bool = False


class RegisterRequest(BaseModel):
    email: str
    password: str = Field(min_length=8, max_length=128)
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    user: UserProfile
    token: str


class CurrentUserResponse(BaseModel):
    user: UserProfile
    display_name: str
    role_display_name: str
    permissions: List[str]


class CreateUserRequest(BaseModel):
    email: str
    role: UserRoleType = "user"
    status: UserStatusType = "active"
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class UpdateUserRequest(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: Optional[UserRoleType] = None
    status: Optional[UserStatusType] = None


class UserResponse(BaseModel):
    data: UserProfile
    message: Optional[str] = None


class Pagination(BaseModel):
    limit: int
    offset: int
    total: int


class UserListResponse(BaseModel):
    data: List[UserProfile]
    pagination: Pagination


class UserBasicInfo(BaseModel):
    """What moderators may see about other users."""
    user_id: str
    email: str
    display_name: str
    role: UserRoleType
    status: UserStatusType


class UserRoleInfo(BaseModel):
    """Legacy admin/whitelist answer for an email."""
    is_admin: bool
    is_whitelisted: bool
    email: str
    last_checked: Optional[float] = None
    source: Literal["cache", "database"] = "database"
    is_valid: bool = True


class PreferenceInfo(BaseModel):
    preference_key: str
    preference_value: Any = None
    created_at: str
    updated_at: str


class SetPreferenceRequest(BaseModel):
    value: Any = None
