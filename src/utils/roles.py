"""Role and status checks shared by routes and the route guard.

Every helper accepts any object exposing ``role`` and ``status`` attributes
(``User``, ``UserProfile`` or ``UserContext``) and treats ``None`` as an
anonymous caller.
"""

from typing import Any, Dict, Optional, Tuple

# Built-in access matrix used when no role_permissions row decides a check.
# Admins are allowed everything and are not listed.
DEFAULT_ACCESS_MATRIX: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "moderator": {
        "users": ("read", "write"),
        "embeds": ("read", "write"),
    },
    "user": {
        "embeds": ("write",),
    },
    "guest": {
        "embeds": ("read",),
    },
}

ROLE_DISPLAY_NAMES: Dict[str, str] = {
    "admin": "Administrator",
    "moderator": "Moderator",
    "user": "User",
    "guest": "Guest",
}


def is_active(user: Optional[Any]) -> bool:
    return user is not None and user.status == "active"


def is_admin(user: Optional[Any]) -> bool:
    return is_active(user) and user.role == "admin"


def is_moderator(user: Optional[Any]) -> bool:
    """True for active moderators and active admins."""
    return is_active(user) and user.role in ("admin", "moderator")


def can_access(user: Optional[Any], resource: str, action: str = "read") -> bool:
    """Check the built-in access matrix.

    Args:
        user: Object with role and status, or None.
        resource: Resource name, e.g. "embeds" or "users".
        action: Action name, e.g. "read" or "write".

    Returns:
        True if the role may perform the action on the resource.
    """
    if not is_active(user):
        return False
    if user.role == "admin":
        return True
    return action in DEFAULT_ACCESS_MATRIX.get(user.role, {}).get(resource, ())


def get_display_name(user: Optional[Any]) -> str:
    if user is None:
        return "Unknown User"
    first_name = getattr(user, "first_name", None) or ""
    last_name = getattr(user, "last_name", None) or ""
    full_name = f"{first_name} {last_name}".strip()
    return full_name or user.email


def get_role_display_name(role: str) -> str:
    return ROLE_DISPLAY_NAMES.get(role, ROLE_DISPLAY_NAMES["user"])
