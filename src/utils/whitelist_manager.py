"""Whitelist management utilities.

The whitelist holds emails and domains allowed to register. An email is
whitelisted when it is listed itself, or when its domain (or a parent domain
of it) is listed.
"""

import logging
import secrets
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import WhitelistEntryNotFoundError
from models.whitelist_entry import WhitelistEntryModel
from utils.role_cache import RoleCache
from utils.validators import classify_whitelist_value, email_domain, normalize_email

logger = logging.getLogger(__name__)


class DuplicateWhitelistEntryError(Exception):
    """Exception raised when a value is already on the whitelist."""

    pass


def _candidate_domains(domain: str) -> List[str]:
    """Return the domain followed by each of its parent domains."""
    labels = domain.split(".")
    return [".".join(labels[i:]) for i in range(len(labels))]


class WhitelistManager:
    """Manages whitelist entries using SQLAlchemy."""

    def __init__(self, db: Session, role_cache: Optional[RoleCache] = None):
        """Initialize WhitelistManager.

        Args:
            db: SQLAlchemy Session.
            role_cache: Cache to invalidate when the whitelist changes.
        """
        self.db = db
        self.role_cache = role_cache

    def _invalidate(self, model: WhitelistEntryModel) -> None:
        if self.role_cache is None:
            return
        # A domain entry can affect any cached email
        self.role_cache.invalidate(model.email if model.email else None)

    def list_entries(self) -> List[WhitelistEntryModel]:
        return (
            self.db.query(WhitelistEntryModel)
            .order_by(WhitelistEntryModel.added_at.desc())
            .all()
        )

    def find_entry(self, value: str) -> Optional[WhitelistEntryModel]:
        entry_type, normalized = classify_whitelist_value(value)
        column = (
            WhitelistEntryModel.email if entry_type == "email" else WhitelistEntryModel.domain
        )
        return self.db.query(WhitelistEntryModel).filter(column == normalized).first()

    def add_entry(
        self,
        value: str,
        entry_type: Optional[str] = None,
        added_by: Optional[str] = None,
    ) -> WhitelistEntryModel:
        """Add an email or a domain to the whitelist.

        Args:
            value: Email or domain as typed.
            entry_type: "email" or "domain"; inferred when None.
            added_by: user_id of the admin adding the entry.

        Returns:
            Created WhitelistEntryModel.

        Raises:
            ValidationError: If the value is malformed.
            DuplicateWhitelistEntryError: If the value is already listed.
        """
        entry_type, normalized = classify_whitelist_value(value, entry_type)
        label = "Email" if entry_type == "email" else "Domain"
        column = (
            WhitelistEntryModel.email if entry_type == "email" else WhitelistEntryModel.domain
        )
        if self.db.query(WhitelistEntryModel).filter(column == normalized).first():
            raise DuplicateWhitelistEntryError(f"{label} is already on the whitelist.")

        model = WhitelistEntryModel(
            entry_id=secrets.token_hex(8),
            email=normalized if entry_type == "email" else None,
            domain=normalized if entry_type == "domain" else None,
            added_at=datetime.now(pytz.utc).isoformat(),
            added_by=added_by,
        )
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise DuplicateWhitelistEntryError(f"{label} is already on the whitelist.") from e

        self._invalidate(model)
        logger.info("Added %s to whitelist: %s", entry_type, normalized)
        return model

    def remove_entry(self, entry_id: str) -> None:
        """Remove a whitelist entry by ID.

        Raises:
            WhitelistEntryNotFoundError: If no entry has this ID.
        """
        model = (
            self.db.query(WhitelistEntryModel)
            .filter(WhitelistEntryModel.entry_id == entry_id)
            .first()
        )
        if not model:
            raise WhitelistEntryNotFoundError(entry_id)
        self._delete(model)

    def remove_value(self, value: str) -> None:
        """Remove a whitelist entry by its email or domain.

        Raises:
            ValidationError: If the value is malformed.
            WhitelistEntryNotFoundError: If the value is not listed.
        """
        model = self.find_entry(value)
        if not model:
            raise WhitelistEntryNotFoundError(value)
        self._delete(model)

    def _delete(self, model: WhitelistEntryModel) -> None:
        self.db.delete(model)
        self.db.commit()
        self._invalidate(model)
        logger.info("Removed from whitelist: %s", model.email or model.domain)

    def is_whitelisted(self, email: str) -> bool:
        """Check an email against email and domain entries.

        Args:
            email: Email to check.

        Returns:
            True if the email or one of its (parent) domains is listed.
        """
        if not email or "@" not in email:
            return False
        email = normalize_email(email)
        domains = _candidate_domains(email_domain(email))
        match = (
            self.db.query(WhitelistEntryModel.entry_id)
            .filter(
                or_(
                    WhitelistEntryModel.email == email,
                    WhitelistEntryModel.domain.in_(domains),
                )
            )
            .first()
        )
        return match is not None
