"""Legacy admin/whitelist role resolution with caching."""

import logging
import time
from typing import Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import ADMIN_EMAIL
from schemas.user import UserRoleInfo
from utils.role_cache import RoleCache
from utils.validators import normalize_email
from utils.whitelist_manager import WhitelistManager

logger = logging.getLogger(__name__)


def is_admin_email(email: str) -> bool:
    return bool(ADMIN_EMAIL) and normalize_email(email) == ADMIN_EMAIL


class AccessChecker:
    """Answers "is this email the admin, and is it whitelisted?"."""

    def __init__(self, db: Session, role_cache: RoleCache):
        self.db = db
        self.role_cache = role_cache
        self.whitelist_manager = WhitelistManager(db, role_cache)

    def get_user_role(self, email: str) -> UserRoleInfo:
        """Resolve the role of an email, from cache when possible.

        The admin email is always whitelisted. A database failure yields an
        invalid answer that grants nothing.

        Args:
            email: Email to resolve.

        Returns:
            UserRoleInfo with source "cache" or "database".
        """
        email = normalize_email(email)
        cached = self.role_cache.get(email)
        if cached:
            return UserRoleInfo(
                is_admin=cached["is_admin"],
                is_whitelisted=cached["is_whitelisted"],
                email=email,
                last_checked=time.time(),
                source="cache",
            )

        is_admin = is_admin_email(email)
        try:
            is_whitelisted = is_admin or self.whitelist_manager.is_whitelisted(email)
        except SQLAlchemyError as e:
            logger.error("Error resolving role for %s: %s", email, e)
            return UserRoleInfo(
                is_admin=False,
                is_whitelisted=False,
                email=email,
                last_checked=time.time(),
                source="database",
                is_valid=False,
            )

        self.role_cache.set(email, is_admin, is_whitelisted)
        return UserRoleInfo(
            is_admin=is_admin,
            is_whitelisted=is_whitelisted,
            email=email,
            last_checked=time.time(),
            source="database",
        )

    def check_user_permissions(
        self, email: str, required_role: str = "user"
    ) -> Tuple[bool, UserRoleInfo]:
        """Check an email against a required legacy role.

        Only the admin may moderate; "user" requires being whitelisted.
        """
        user_role = self.get_user_role(email)
        if required_role in ("admin", "moderator"):
            has_permission = user_role.is_admin
        elif required_role == "user":
            has_permission = user_role.is_whitelisted
        else:
            has_permission = False
        return has_permission and user_role.is_valid, user_role
