"""User management routes.

Listing and creating users is admin-only. A single profile can be read by
admins, moderators and the user themself; users edit their own names, only
admins change roles and statuses.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query, status

from config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from core.dependencies import CurrentUserDep, UserManagerDep
from core.exceptions import UserNotFoundError, ValidationError
from schemas.user import (
    CreateUserRequest,
    Pagination,
    UpdateUserRequest,
    UserListResponse,
    UserResponse,
    UserRoleType,
    UserStatusType,
)
from utils import roles
from utils.converters import user_to_profile
from utils.user_manager import UserAlreadyExistsError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])

SELF_EDITABLE_FIELDS = ("first_name", "last_name", "avatar_url")
ADMIN_ONLY_FIELDS = ("role", "status")


def _require_admin(current_user) -> None:
    if not roles.is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )


@router.get("", response_model=UserListResponse, summary="List users")
def list_users(
    current_user: CurrentUserDep,
    user_manager: UserManagerDep,
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT),
    offset: int = Query(0, ge=0),
    role: Optional[UserRoleType] = None,
    status_filter: Optional[UserStatusType] = Query(None, alias="status"),
    search: Optional[str] = None,
) -> UserListResponse:
    _require_admin(current_user)
    users = user_manager.list_users(
        limit=limit, offset=offset, role=role, status=status_filter, search=search
    )
    total = user_manager.count_users(role=role, status=status_filter, search=search)
    return UserListResponse(
        data=[user_to_profile(u) for u in users],
        pagination=Pagination(limit=limit, offset=offset, total=total),
    )


@router.post("", response_model=UserResponse, status_code=201, summary="Create a user")
def create_user(
    req: CreateUserRequest,
    current_user: CurrentUserDep,
    user_manager: UserManagerDep,
) -> UserResponse:
    """Provision a profile. The user sets a password by registering."""
    _require_admin(current_user)
    try:
        user = user_manager.create_user(
            email=req.email,
            role=req.role,
            status=req.status,
            first_name=req.first_name,
            last_name=req.last_name,
            created_by=current_user.user_id,
        )
    except UserAlreadyExistsError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User with this email already exists",
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return UserResponse(data=user_to_profile(user), message="User created successfully")


@router.get("/{user_id}", response_model=UserResponse, summary="Get a user")
def get_user(
    user_id: str,
    current_user: CurrentUserDep,
    user_manager: UserManagerDep,
) -> UserResponse:
    user = user_manager.get_user_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if current_user.user_id != user_id and not roles.is_moderator(current_user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return UserResponse(data=user_to_profile(user))


@router.put("/{user_id}", response_model=UserResponse, summary="Update a user")
def update_user(
    user_id: str,
    req: UpdateUserRequest,
    current_user: CurrentUserDep,
    user_manager: UserManagerDep,
) -> UserResponse:
    """Update a profile.

    Permission requirements:
    - Anyone: first_name, last_name and avatar_url of their own profile
    - Admin: any profile, including role and status

    Role and status sent by a non-admin are ignored.
    """
    is_admin = roles.is_admin(current_user)
    if current_user.user_id != user_id and not is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required to update other users",
        )
    if user_manager.get_user_by_id(user_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    allowed = SELF_EDITABLE_FIELDS + (ADMIN_ONLY_FIELDS if is_admin else ())
    updates = {
        field: value
        for field, value in req.model_dump(exclude_unset=True).items()
        if field in allowed and value is not None
    }
    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No valid updates provided",
        )

    try:
        user = user_manager.update_user_profile(user_id, updates, updated_by=current_user.user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return UserResponse(data=user_to_profile(user), message="User updated successfully")


@router.delete("/{user_id}", summary="Suspend a user")
def delete_user(
    user_id: str,
    current_user: CurrentUserDep,
    user_manager: UserManagerDep,
) -> dict:
    """Suspend a user. Profiles are never hard-deleted."""
    _require_admin(current_user)
    if current_user.user_id == user_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot delete your own account",
        )
    try:
        user_manager.update_user_status(user_id, "suspended", updated_by=current_user.user_id)
    except UserNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("User %s suspended by %s", user_id, current_user.user_id)
    return {"success": True, "message": "User suspended successfully"}
