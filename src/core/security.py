"""JWT session tokens.

A session token is accepted from the ``Authorization: Bearer`` header or from
the session cookie set at login.
"""

from datetime import datetime, timedelta
from typing import Optional

import pytz
from fastapi import Request
from jose import JWTError, jwt

from config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_ALGORITHM,
    JWT_SECRET_KEY,
    SESSION_COOKIE_NAME,
)


class InvalidSessionError(Exception):
    """Raised when a session token cannot be decoded or has no subject."""

    pass


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(pytz.utc) + expires_delta
    else:
        expire = datetime.now(pytz.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and verify a JWT access token.

    Returns:
        Decoded token payload, guaranteed to carry a "sub" claim.

    Raises:
        InvalidSessionError: If the token is invalid, expired or has no subject.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        raise InvalidSessionError(str(e)) from e
    if not payload.get("sub"):
        raise InvalidSessionError("Token has no subject")
    return payload


def get_request_token(request: Request) -> Optional[str]:
    """Read the session token from the Bearer header, then the cookie."""
    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return request.cookies.get(SESSION_COOKIE_NAME) or None
