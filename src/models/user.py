"""User database model.

This module defines the User database model using SQLAlchemy.
"""

from sqlalchemy import Column, Integer, String
from .base import Base


class UserModel(Base):
    """User profile database model."""

    __tablename__ = "users"

    user_id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    # Null for profiles provisioned by an admin until the user registers
    password_hash = Column(String, nullable=True)
    role = Column(String, nullable=False)  # 'admin', 'moderator', 'user' or 'guest'
    status = Column(String, nullable=False)  # 'active', 'inactive', 'suspended' or 'pending'
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    last_login_at = Column(String, nullable=True)  # ISO format string
    login_count = Column(Integer, nullable=False, default=0)
    created_at = Column(String, nullable=False)  # ISO format string
    updated_at = Column(String, nullable=False)  # ISO format string
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
