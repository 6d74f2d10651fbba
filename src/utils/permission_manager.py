"""Role permission lookups backed by the role_permissions table."""

import logging
from datetime import datetime
from typing import Any, Dict, List

import pytz
from sqlalchemy.orm import Session

from config import USER_ROLES
from core.exceptions import ValidationError
from models.role_permission import RolePermissionModel
from utils import roles

logger = logging.getLogger(__name__)

RESOURCES = ("embeds", "users", "whitelist", "roles")
ACTIONS = ("read", "write")


def default_permission_rows() -> List[Dict[str, Any]]:
    """Expand the built-in access matrix into one row per role/resource/action."""
    rows = []
    for role in USER_ROLES:
        for resource in RESOURCES:
            for action in ACTIONS:
                if role == "admin":
                    allowed = True
                else:
                    allowed = action in roles.DEFAULT_ACCESS_MATRIX.get(role, {}).get(
                        resource, ()
                    )
                rows.append(
                    {"role": role, "resource": resource, "action": action, "is_allowed": allowed}
                )
    return rows


class PermissionManager:
    """Reads and writes role permissions."""

    def __init__(self, db: Session):
        self.db = db

    def get_role_permissions(self, role: str) -> List[RolePermissionModel]:
        return (
            self.db.query(RolePermissionModel)
            .filter(RolePermissionModel.role == role)
            .order_by(RolePermissionModel.resource, RolePermissionModel.action)
            .all()
        )

    def get_all_permissions(self) -> Dict[str, List[RolePermissionModel]]:
        return {role: self.get_role_permissions(role) for role in USER_ROLES}

    def get_permission_strings(self, role: str) -> List[str]:
        """Allowed permissions of a role as "resource:action" strings."""
        return [
            f"{p.resource}:{p.action}"
            for p in self.get_role_permissions(role)
            if p.is_allowed
        ]

    def upsert_permission(
        self, role: str, resource: str, action: str, is_allowed: bool
    ) -> RolePermissionModel:
        """Insert or update the row for (role, resource, action).

        Raises:
            ValidationError: If a field is missing or the role is unknown.
        """
        if not role or not resource or not action:
            raise ValidationError("Role, resource, and action are required")
        if role not in USER_ROLES:
            raise ValidationError(f"Invalid role: {role}")

        now = datetime.now(pytz.utc).isoformat()
        model = (
            self.db.query(RolePermissionModel)
            .filter(
                RolePermissionModel.role == role,
                RolePermissionModel.resource == resource,
                RolePermissionModel.action == action,
            )
            .first()
        )
        if model:
            model.is_allowed = is_allowed
            model.created_at = now
        else:
            model = RolePermissionModel(
                role=role,
                resource=resource,
                action=action,
                is_allowed=is_allowed,
                created_at=now,
            )
            self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info(
            "Permission %s:%s for role %s set to %s", resource, action, role, is_allowed
        )
        return model

    def check_user_permission(self, user: Any, resource: str, action: str) -> bool:
        """Decide whether a user may perform an action on a resource.

        Inactive users are denied and admins are allowed. Otherwise a
        role_permissions row decides, falling back to the built-in matrix.
        """
        if not roles.is_active(user):
            return False
        if user.role == "admin":
            return True
        model = (
            self.db.query(RolePermissionModel)
            .filter(
                RolePermissionModel.role == user.role,
                RolePermissionModel.resource == resource,
                RolePermissionModel.action == action,
            )
            .first()
        )
        if model is not None:
            return bool(model.is_allowed)
        return roles.can_access(user, resource, action)

    def seed_default_permissions(self) -> int:
        """Insert the built-in rows that are missing. Existing rows are kept.

        Returns:
            Number of rows inserted.
        """
        existing = {
            (p.role, p.resource, p.action)
            for p in self.db.query(RolePermissionModel).all()
        }
        now = datetime.now(pytz.utc).isoformat()
        inserted = 0
        for row in default_permission_rows():
            if (row["role"], row["resource"], row["action"]) in existing:
                continue
            self.db.add(RolePermissionModel(created_at=now, **row))
            inserted += 1
        if inserted:
            self.db.commit()
            logger.info("Seeded %d default role permissions", inserted)
        return inserted
