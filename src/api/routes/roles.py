"""Role permission routes."""

from typing import Optional

from fastapi import APIRouter, HTTPException, status

from core.dependencies import CurrentUserDep, PermissionManagerDep
from core.exceptions import ValidationError
from schemas.permission import RolePermissionInfo, UpsertPermissionRequest
from schemas.user import UserRoleType
from utils import roles as role_helpers
from utils.converters import model_to_permission_info

router = APIRouter(prefix="/api/roles", tags=["Roles"])


@router.get("", summary="List role permissions")
def list_role_permissions(
    current_user: CurrentUserDep,
    permissions: PermissionManagerDep,
    role: Optional[UserRoleType] = None,
) -> dict:
    """Permissions of one role, or of every role keyed by role name."""
    if role:
        rows = permissions.get_role_permissions(role)
        return {"data": [model_to_permission_info(p) for p in rows]}
    return {
        "data": {
            name: [model_to_permission_info(p) for p in rows]
            for name, rows in permissions.get_all_permissions().items()
        }
    }


@router.post("", response_model=RolePermissionInfo, summary="Set a role permission")
def upsert_role_permission(
    req: UpsertPermissionRequest,
    current_user: CurrentUserDep,
    permissions: PermissionManagerDep,
) -> RolePermissionInfo:
    if not role_helpers.is_admin(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    try:
        model = permissions.upsert_permission(
            req.role, req.resource, req.action, req.is_allowed
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return model_to_permission_info(model)
