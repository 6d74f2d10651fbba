"""Moderation routes (moderator tier, enforced by the route guard)."""

from typing import List, Optional

from fastapi import APIRouter, Query

from config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from core.dependencies import UserManagerDep
from schemas.user import UserBasicInfo
from utils import roles

router = APIRouter(prefix="/api/moderation", tags=["Moderation"])


@router.get("/users", response_model=List[UserBasicInfo], summary="Basic info of all users")
def list_users_basic(
    user_manager: UserManagerDep,
    search: Optional[str] = None,
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
) -> List[UserBasicInfo]:
    users = user_manager.list_users(limit=limit, offset=offset, search=search)
    return [
        UserBasicInfo(
            user_id=u.user_id,
            email=u.email,
            display_name=roles.get_display_name(u),
            role=u.role,
            status=u.status,
        )
        for u in users
    ]
