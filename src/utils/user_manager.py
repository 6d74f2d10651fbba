"""User management utilities.

This module provides user management functionality including profile storage,
password hashing, role/status updates, login bookkeeping and preferences.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import bcrypt
import pytz
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import BCRYPT_ROUNDS, DEFAULT_PAGE_LIMIT, USER_ROLES, USER_STATUSES
from core.exceptions import UserNotFoundError, ValidationError
from models.user import UserModel
from models.user_preference import UserPreferenceModel
from schemas.user import User
from utils.converters import model_to_user, user_to_model
from utils.validators import is_valid_email, normalize_email

logger = logging.getLogger(__name__)

# bcrypt ignores everything past 72 bytes
BCRYPT_MAX_BYTES = 72

# Fields a profile update may touch
UPDATABLE_FIELDS = ("first_name", "last_name", "avatar_url", "role", "status")


class UserAlreadyExistsError(Exception):
    """Exception raised when trying to create a user that already exists."""

    pass


def _now_iso() -> str:
    return datetime.now(pytz.utc).isoformat()


class UserManager:
    """Manages user data persistence and operations using SQLAlchemy."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        password_bytes = password.encode("utf-8")
        if len(password_bytes) > BCRYPT_MAX_BYTES:
            logger.warning(
                "Password exceeds %d bytes (%d bytes), truncating",
                BCRYPT_MAX_BYTES,
                len(password_bytes),
            )
            password_bytes = password_bytes[:BCRYPT_MAX_BYTES]

        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: Optional[str]) -> bool:
        """Verify a password against a bcrypt hash.

        Args:
            plain_password: Plain text password to verify.
            hashed_password: Bcrypt hash string, or None for accounts that
                never set a password.

        Returns:
            True if password matches, False otherwise.
        """
        if not hashed_password:
            return False
        password_bytes = plain_password.encode("utf-8")[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    def _get_model(self, user_id: str) -> UserModel:
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if not model:
            raise UserNotFoundError(user_id)
        return model

    def create_user(
        self,
        email: str,
        password: Optional[str] = None,
        role: str = "user",
        status: str = "active",
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> User:
        """Create a new user profile.

        Args:
            email: Email address, normalized to lowercase.
            password: Plain text password, or None for a profile provisioned
                by an admin that the user claims later at registration.
            role: One of USER_ROLES.
            status: One of USER_STATUSES.
            first_name: Optional first name.
            last_name: Optional last name.
            created_by: user_id of the creator, if any.

        Returns:
            Created User object.

        Raises:
            ValidationError: If email, role or status is invalid.
            UserAlreadyExistsError: If the email is already registered.
        """
        email = normalize_email(email)
        if not is_valid_email(email):
            raise ValidationError("Please enter a valid email address.")
        if role not in USER_ROLES:
            raise ValidationError(f"Invalid role: {role}")
        if status not in USER_STATUSES:
            raise ValidationError(f"Invalid status: {status}")

        if self.get_user_by_email(email) is not None:
            raise UserAlreadyExistsError(f"User with email '{email}' already exists")

        user = User(
            email=email,
            password_hash=self.hash_password(password) if password else None,
            role=role,
            status=status,
            first_name=first_name,
            last_name=last_name,
            created_by=created_by,
            updated_by=created_by,
        )

        # The unique constraint still catches two concurrent registrations
        try:
            model = user_to_model(user)
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError(
                f"User with email '{email}' already exists"
            ) from e

        logger.info("Created user: %s (role=%s, status=%s)", email, role, status)
        return user

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by user ID.

        Args:
            user_id: User ID to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = self.db.query(UserModel).filter(UserModel.user_id == user_id).first()
        if model:
            return model_to_user(model)
        return None

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (case-insensitive).

        Args:
            email: Email to look up.

        Returns:
            User object if found, None otherwise.
        """
        model = (
            self.db.query(UserModel)
            .filter(UserModel.email == normalize_email(email))
            .first()
        )
        if model:
            return model_to_user(model)
        return None

    def list_users(
        self,
        limit: int = DEFAULT_PAGE_LIMIT,
        offset: int = 0,
        role: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[User]:
        """List users, newest first, with optional filters.

        Args:
            limit: Maximum number of users returned.
            offset: Number of users skipped.
            role: Optional role filter.
            status: Optional status filter.
            search: Optional case-insensitive substring over email and names.

        Returns:
            List of User objects.
        """
        query = self.db.query(UserModel)
        if role:
            query = query.filter(UserModel.role == role)
        if status:
            query = query.filter(UserModel.status == status)
        if search:
            query = query.filter(self._search_clause(search))
        models = (
            query.order_by(UserModel.created_at.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [model_to_user(m) for m in models]

    def count_users(
        self,
        role: Optional[str] = None,
        status: Optional[str] = None,
        search: Optional[str] = None,
    ) -> int:
        query = self.db.query(func.count(UserModel.user_id))
        if role:
            query = query.filter(UserModel.role == role)
        if status:
            query = query.filter(UserModel.status == status)
        if search:
            query = query.filter(self._search_clause(search))
        return query.scalar() or 0

    def search_users(self, query: str, limit: int = 20) -> List[User]:
        """Search users by email, first name or last name."""
        return self.list_users(limit=limit, search=query)

    @staticmethod
    def _search_clause(search: str):
        pattern = f"%{search.strip().lower()}%"
        return or_(
            func.lower(UserModel.email).like(pattern),
            func.lower(UserModel.first_name).like(pattern),
            func.lower(UserModel.last_name).like(pattern),
        )

    def update_user_profile(
        self,
        user_id: str,
        updates: Dict[str, Any],
        updated_by: Optional[str] = None,
    ) -> User:
        """Apply a partial update to a user profile.

        Args:
            user_id: The user to update.
            updates: Mapping of field name to new value. Only UPDATABLE_FIELDS
                are accepted.
            updated_by: user_id of the editor.

        Returns:
            Updated User object.

        Raises:
            UserNotFoundError: If the user does not exist.
            ValidationError: If a field is unknown or a role/status invalid.
        """
        unknown = set(updates) - set(UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")
        if "role" in updates and updates["role"] not in USER_ROLES:
            raise ValidationError(f"Invalid role: {updates['role']}")
        if "status" in updates and updates["status"] not in USER_STATUSES:
            raise ValidationError(f"Invalid status: {updates['status']}")

        model = self._get_model(user_id)
        for field, value in updates.items():
            setattr(model, field, value)
        model.updated_at = _now_iso()
        model.updated_by = updated_by
        self.db.commit()
        self.db.refresh(model)
        logger.info("Updated user %s: %s", user_id, ", ".join(sorted(updates)))
        return model_to_user(model)

    def update_user_role(
        self, user_id: str, role: str, updated_by: Optional[str] = None
    ) -> User:
        return self.update_user_profile(user_id, {"role": role}, updated_by)

    def update_user_status(
        self, user_id: str, status: str, updated_by: Optional[str] = None
    ) -> User:
        return self.update_user_profile(user_id, {"status": status}, updated_by)

    def set_password(self, user_id: str, password: str) -> User:
        """Set the password of an existing profile."""
        model = self._get_model(user_id)
        model.password_hash = self.hash_password(password)
        model.updated_at = _now_iso()
        model.updated_by = user_id
        self.db.commit()
        self.db.refresh(model)
        return model_to_user(model)

    def record_login(self, user_id: str) -> User:
        """Bump login_count and stamp last_login_at."""
        model = self._get_model(user_id)
        now = _now_iso()
        model.last_login_at = now
        model.login_count = (model.login_count or 0) + 1
        model.updated_at = now
        self.db.commit()
        self.db.refresh(model)
        return model_to_user(model)

    def get_preferences(self, user_id: str) -> List[UserPreferenceModel]:
        return (
            self.db.query(UserPreferenceModel)
            .filter(UserPreferenceModel.user_id == user_id)
            .order_by(UserPreferenceModel.preference_key)
            .all()
        )

    def set_preference(self, user_id: str, key: str, value: Any) -> UserPreferenceModel:
        """Create or replace one preference of a user.

        Raises:
            UserNotFoundError: If the user does not exist.
            ValidationError: If the key is empty.
        """
        key = key.strip()
        if not key:
            raise ValidationError("Preference key cannot be empty.")
        self._get_model(user_id)

        now = _now_iso()
        model = (
            self.db.query(UserPreferenceModel)
            .filter(
                UserPreferenceModel.user_id == user_id,
                UserPreferenceModel.preference_key == key,
            )
            .first()
        )
        if model:
            model.preference_value = value
            model.updated_at = now
        else:
            model = UserPreferenceModel(
                user_id=user_id,
                preference_key=key,
                preference_value=value,
                created_at=now,
                updated_at=now,
            )
            self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        return model
