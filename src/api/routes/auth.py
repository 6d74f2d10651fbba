"""Authentication routes.

This module handles HTTP endpoints for registration, login and the caller's
own identity.
"""

import logging
from datetime import timedelta

from fastapi import APIRouter, HTTPException, Response, status

from config import ACCESS_TOKEN_EXPIRE_MINUTES, SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE
from core.dependencies import (
    AccessCheckerDep,
    CurrentUserDep,
    UserManagerDep,
    WhitelistManagerDep,
)
from core.exceptions import ValidationError
from core.security import create_access_token
from schemas.user import (
    CurrentUserResponse,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
    UserRoleInfo,
)
from utils import roles
from utils.access_checker import is_admin_email
from utils.converters import user_to_profile
from utils.user_manager import UserAlreadyExistsError
from utils.validators import is_valid_email, normalize_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", response_model=UserResponse, status_code=201, summary="Register")
def register(
    req: RegisterRequest,
    user_manager: UserManagerDep,
    whitelist_manager: WhitelistManagerDep,
) -> UserResponse:
    """Register a new account.

    Registration requirements:
    - The configured admin email may always register and becomes admin.
    - Any other email must be whitelisted (directly or by domain), or belong
      to a profile an admin created that has no password yet.

    Raises:
        HTTPException: 400 on a malformed email, 403 when not whitelisted,
            409 when the email is already registered.
    """
    email = normalize_email(req.email)
    if not is_valid_email(email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please enter a valid email address.",
        )

    existing = user_manager.get_user_by_email(email)
    if existing is not None:
        if existing.password_hash:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="User with this email already exists",
            )
        # Claim a profile provisioned by an admin
        user = user_manager.set_password(existing.user_id, req.password)
        logger.info("User %s claimed a provisioned profile", email)
        return UserResponse(
            data=user_to_profile(user), message="User registered successfully"
        )

    is_admin = is_admin_email(email)
    if not is_admin and not whitelist_manager.is_whitelisted(email):
        logger.info("Registration refused for non-whitelisted email %s", email)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Email is not on the whitelist.",
        )

    try:
        user = user_manager.create_user(
            email=email,
            password=req.password,
            role="admin" if is_admin else "user",
            first_name=req.first_name,
            last_name=req.last_name,
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return UserResponse(data=user_to_profile(user), message="User registered successfully")


@router.post("/login", response_model=LoginResponse, summary="Login")
def login(
    req: LoginRequest,
    response: Response,
    user_manager: UserManagerDep,
) -> LoginResponse:
    """Login with email and password.

    Records the login and returns a JWT, also set as the session cookie.

    Raises:
        HTTPException: 401 on bad credentials, 403 for suspended accounts.
    """
    user = user_manager.get_user_by_email(req.email)
    if user is None or not user_manager.verify_password(req.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if user.status == "suspended":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account suspended",
        )

    user = user_manager.record_login(user.user_id)
    token = create_access_token(
        data={"sub": user.user_id, "email": user.email},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=SESSION_COOKIE_SECURE,
    )
    logger.info("User logged in: %s", user.email)
    return LoginResponse(user=user_to_profile(user), token=token)


@router.post("/logout", summary="Logout")
def logout(response: Response) -> dict:
    """Logout endpoint.

    Tokens are stateless, so logout only clears the session cookie. Clients
    using the Bearer header drop the token themselves.
    """
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", response_model=CurrentUserResponse, summary="Current user")
def get_current_user_info(
    current_user: CurrentUserDep,
    user_manager: UserManagerDep,
) -> CurrentUserResponse:
    user = user_manager.get_user_by_id(current_user.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return CurrentUserResponse(
        user=user_to_profile(user),
        display_name=roles.get_display_name(user),
        role_display_name=roles.get_role_display_name(user.role),
        permissions=current_user.permissions,
    )


@router.get("/role", response_model=UserRoleInfo, summary="Admin/whitelist status")
def get_user_role(
    current_user: CurrentUserDep,
    checker: AccessCheckerDep,
) -> UserRoleInfo:
    """Whether the caller is the admin account and whether it is whitelisted."""
    return checker.get_user_role(current_user.email)
