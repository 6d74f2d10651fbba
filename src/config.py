"""Configuration module for Embed Manager.

This module provides centralized configuration management, including directory
paths, API server settings, authentication settings, and application defaults.
All configuration values can be overridden via environment variables.
"""

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "DATABASE_URL", f"sqlite:///{DATA_DIR}/embed_manager.db"
)

# --- API Server Configuration ---

API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
API_PORT: int = int(os.getenv("API_PORT", "8000"))

# CORS allowed origins (comma-separated list)
# Default includes local development addresses. For production, set via
# CORS_ALLOWED_ORIGINS environment variable.
_CORS_ALLOWED_ORIGINS_STR: str = os.getenv(
    "CORS_ALLOWED_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173,http://localhost:3000,"
    "http://127.0.0.1:3000",
)
CORS_ALLOWED_ORIGINS: List[str] = [
    origin.strip()
    for origin in _CORS_ALLOWED_ORIGINS_STR.split(",")
    if origin.strip()
]

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

# --- Authentication Configuration ---

JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", "change-me-in-production")
JWT_ALGORITHM: str = os.getenv("JWT_ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(
    os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7))  # 7 days
)

# Name of the cookie carrying the session token (alternative to Bearer header)
SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "embed_session")
SESSION_COOKIE_SECURE: bool = (
    os.getenv("SESSION_COOKIE_SECURE", "false").lower() == "true"
)

# The account with this email is always an active admin and never needs to be
# whitelisted. Leave unset to disable the promotion.
_ADMIN_EMAIL_RAW: Optional[str] = os.getenv("ADMIN_EMAIL")
ADMIN_EMAIL: Optional[str] = (
    _ADMIN_EMAIL_RAW.strip().lower() if _ADMIN_EMAIL_RAW else None
)

# bcrypt cost factor for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

# --- Role Cache Configuration ---

# Seconds a cached admin/whitelist answer stays valid
ROLE_CACHE_TTL_SECONDS: int = int(os.getenv("ROLE_CACHE_TTL_SECONDS", "300"))

# --- Application Defaults ---

DEFAULT_PAGE_LIMIT: int = int(os.getenv("DEFAULT_PAGE_LIMIT", "50"))
MAX_PAGE_LIMIT: int = 200

# Title used when the pasted embed code carries no title attribute
DEFAULT_EMBED_TITLE: str = "Untitled Content"

# Role and status vocabularies
USER_ROLES: List[str] = ["admin", "moderator", "user", "guest"]
USER_STATUSES: List[str] = ["active", "inactive", "suspended", "pending"]
DEFAULT_USER_ROLE: str = "user"
DEFAULT_USER_STATUS: str = "active"
