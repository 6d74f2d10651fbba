"""Role permission and role cache schema definitions."""

from typing import List, Optional

from pydantic import BaseModel

from schemas.user import UserRoleType


class RolePermissionInfo(BaseModel):
    role: UserRoleType
    resource: str
    action: str
    is_allowed: bool
    created_at: str


class UpsertPermissionRequest(BaseModel):
    role: Optional[str] = None
    resource: Optional[str] = None
    action: Optional[str] = None
    is_allowed: bool = False


class RoleCacheEntryInfo(BaseModel):
    email: str
    is_admin: bool
    is_whitelisted: bool
    age: float


class RoleCacheStats(BaseModel):
    size: int
    entries: List[RoleCacheEntryInfo]
    last_cleanup: Optional[float] = None
    total_requests: int
    cache_hit_rate: float
