"""Route protection middleware.

Every request outside the public routes must carry a valid session. The guard
loads the caller's profile, builds a ``UserContext`` and enforces the route
tier the path belongs to before the request reaches a handler. The context is
stored on ``request.state.user_context`` and echoed in ``X-User-*`` response
headers.
"""

import logging
from typing import Dict, Optional, Sequence
from urllib.parse import quote

from fastapi import Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware

from core import database
from core.security import InvalidSessionError, decode_access_token, get_request_token
from schemas.user import UserContext
from utils import roles
from utils.access_checker import is_admin_email
from utils.permission_manager import PermissionManager
from utils.role_cache import get_role_cache
from utils.user_manager import UserManager
from utils.whitelist_manager import WhitelistManager

logger = logging.getLogger(__name__)

ROUTES_CONFIG: Dict[str, Sequence[str]] = {
    # No session needed
    "PUBLIC": (
        "/",
        "/api/health",
        "/api/auth/register",
        "/api/auth/login",
        "/api/auth/logout",
        "/docs*",
        "/redoc",
        "/openapi.json",
    ),
    # Active admin only
    "ADMIN": (
        "/api/admin",
        "/api/whitelist",
    ),
    # Active moderator or admin
    "MODERATOR": (
        "/api/moderation",
    ),
    # Any active account
    "AUTHENTICATED": (
        "/api/*",
    ),
}


def matches_route(pathname: str, routes: Sequence[str]) -> bool:
    """Check a path against route patterns.

    A pattern ending in '*' is a prefix match. Any other pattern matches
    itself and its sub-paths.
    """
    for route in routes:
        if route.endswith("*"):
            if pathname.startswith(route[:-1]):
                return True
        elif pathname == route or pathname.startswith(f"{route}/"):
            return True
    return False


def create_error_response(message: str, status: int, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content={"error": {"message": message, "code": code, "status": status}},
    )


def build_user_context(db, user_id: str) -> Optional[UserContext]:
    """Build the request identity from the user's profile.

    Promotes the configured admin email to admin and resolves the role's
    allowed permissions.

    Returns:
        UserContext, or None if no profile has this ID.
    """
    user_manager = UserManager(db)
    user = user_manager.get_user_by_id(user_id)
    if user is None:
        return None

    if is_admin_email(user.email) and user.role != "admin":
        user = user_manager.update_user_role(user.user_id, "admin", updated_by=user.user_id)
        logger.info("Promoted configured admin email %s to admin", user.email)

    return UserContext(
        user_id=user.user_id,
        email=user.email,
        role=user.role,
        status=user.status,
        first_name=user.first_name,
        last_name=user.last_name,
        permissions=PermissionManager(db).get_permission_strings(user.role),
        is_active=user.status == "active",
    )


def fallback_user_context(db, user_id: str, email: str) -> UserContext:
    """Identity used when the profile lookup failed: whitelisted means active."""
    context = UserContext(user_id=user_id, email=email, status="inactive")
    try:
        if email and WhitelistManager(db, get_role_cache()).is_whitelisted(email):
            context.status = "active"
            context.is_active = True
    except SQLAlchemyError as e:
        logger.error("Whitelist fallback check failed: %s", e)
    return context


def check_route_tier(pathname: str, context: UserContext) -> Optional[JSONResponse]:
    """Return an error response when the context may not access the path."""
    if matches_route(pathname, ROUTES_CONFIG["ADMIN"]):
        if not roles.is_admin(context):
            return create_error_response("Admin access required", 403, "ADMIN_REQUIRED")
    if matches_route(pathname, ROUTES_CONFIG["MODERATOR"]):
        if not roles.is_moderator(context):
            return create_error_response(
                "Moderator access required", 403, "MODERATOR_REQUIRED"
            )
    if matches_route(pathname, ROUTES_CONFIG["AUTHENTICATED"]):
        if not context.is_active:
            return create_error_response(
                "Active account required", 403, "ACCOUNT_INACTIVE"
            )
    return None


class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Authenticate requests and enforce route tiers."""

    async def dispatch(self, request: Request, call_next):
        pathname = request.url.path
        if request.method == "OPTIONS" or matches_route(pathname, ROUTES_CONFIG["PUBLIC"]):
            return await call_next(request)

        token = get_request_token(request)
        if not token:
            return create_error_response("Authentication required", 401, "AUTH_REQUIRED")
        try:
            payload = decode_access_token(token)
        except InvalidSessionError as e:
            logger.info("Rejected session on %s: %s", pathname, e)
            return create_error_response("Session validation failed", 401, "SESSION_ERROR")

        user_id = payload["sub"]
        try:
            context = await run_in_threadpool(
                self._resolve_context, user_id, payload.get("email", "")
            )
        except Exception:
            logger.exception("Route guard failed on %s", pathname)
            return create_error_response("Internal server error", 500, "INTERNAL_ERROR")

        if context is None:
            return create_error_response("Authentication required", 401, "AUTH_REQUIRED")

        denied = check_route_tier(pathname, context)
        if denied is not None:
            return denied

        request.state.user_context = context
        response = await call_next(request)
        response.headers["X-User-Id"] = context.user_id
        # Header values must be latin-1
        response.headers["X-User-Email"] = quote(context.email, safe="@")
        response.headers["X-User-Role"] = context.role
        response.headers["X-User-Status"] = context.status
        response.headers["X-Is-Active"] = str(context.is_active).lower()
        response.headers["X-Permissions"] = ",".join(context.permissions)
        response.headers["X-Auth-Method"] = "jwt"
        return response

    @staticmethod
    def _resolve_context(user_id: str, email: str) -> Optional[UserContext]:
        db = database.SessionLocal()
        try:
            try:
                return build_user_context(db, user_id)
            except SQLAlchemyError as e:
                logger.error("User context validation failed: %s", e)
                db.rollback()
                return fallback_user_context(db, user_id, email)
        finally:
            db.close()
