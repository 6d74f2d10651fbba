"""Dependency injection module for FastAPI.

This module provides dependency injection functions for FastAPI routes,
following Google Python Style Guide and FastAPI best practices.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from core.database import get_db
from schemas.user import UserContext
from utils import access_checker
from utils import embed_manager
from utils import permission_manager
from utils import user_manager
from utils import whitelist_manager
from utils.role_cache import RoleCache, get_role_cache


def get_current_user(request: Request) -> UserContext:
    """Get the identity the route guard attached to the request.

    Args:
        request: Incoming request.

    Returns:
        UserContext of the caller.

    Raises:
        HTTPException: If the request carries no authenticated identity.
    """
    context = getattr(request.state, "user_context", None)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return context


def get_user_manager(db: Session = Depends(get_db)) -> user_manager.UserManager:
    """Get UserManager instance with request-scoped DB session.

    Args:
        db: Database session.

    Returns:
        UserManager instance.
    """
    return user_manager.UserManager(db)


def get_embed_manager(db: Session = Depends(get_db)) -> embed_manager.EmbedManager:
    """Get EmbedManager instance with request-scoped DB session."""
    return embed_manager.EmbedManager(db)


def get_whitelist_manager(
    db: Session = Depends(get_db),
) -> whitelist_manager.WhitelistManager:
    """Get WhitelistManager instance wired to the shared role cache."""
    return whitelist_manager.WhitelistManager(db, get_role_cache())


def get_permission_manager(
    db: Session = Depends(get_db),
) -> permission_manager.PermissionManager:
    """Get PermissionManager instance with request-scoped DB session."""
    return permission_manager.PermissionManager(db)


def get_access_checker(db: Session = Depends(get_db)) -> access_checker.AccessChecker:
    """Get AccessChecker instance wired to the shared role cache."""
    return access_checker.AccessChecker(db, get_role_cache())


# Type aliases for dependency injection
CurrentUserDep = Annotated[UserContext, Depends(get_current_user)]
UserManagerDep = Annotated[user_manager.UserManager, Depends(get_user_manager)]
EmbedManagerDep = Annotated[embed_manager.EmbedManager, Depends(get_embed_manager)]
WhitelistManagerDep = Annotated[
    whitelist_manager.WhitelistManager, Depends(get_whitelist_manager)
]
PermissionManagerDep = Annotated[
    permission_manager.PermissionManager, Depends(get_permission_manager)
]
AccessCheckerDep = Annotated[access_checker.AccessChecker, Depends(get_access_checker)]
RoleCacheDep = Annotated[RoleCache, Depends(get_role_cache)]
