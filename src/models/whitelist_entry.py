"""Whitelist entry database model."""

from sqlalchemy import Column, String
from .base import Base


class WhitelistEntryModel(Base):
    """An email or a domain allowed to register.

    Exactly one of ``email`` and ``domain`` is set.
    """

    __tablename__ = "whitelist"

    entry_id = Column(String, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=True)
    domain = Column(String, unique=True, index=True, nullable=True)
    added_at = Column(String, nullable=False)  # ISO format string
    added_by = Column(String, nullable=True)  # user_id
