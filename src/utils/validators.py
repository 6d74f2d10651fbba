"""Email and domain validation helpers.

The whitelist accepts either a full email address or a bare domain. Both the
admin form and the registration endpoint go through these helpers so that the
same normalization applies everywhere.
"""

import re
from typing import Optional, Tuple

from core.exceptions import ValidationError

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DOMAIN_REGEX = re.compile(
    r"^[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?"
    r"(\.[a-zA-Z0-9]([a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?)*$"
)

INVALID_EMAIL_MESSAGE = "Please enter a valid email address."
INVALID_DOMAIN_MESSAGE = "Please enter a valid domain (e.g., example.com)."


def normalize_email(email: str) -> str:
    return email.strip().lower()


def normalize_domain(domain: str) -> str:
    """Lowercase a domain and drop a leading '@' ("@example.com" -> "example.com")."""
    return domain.strip().lower().lstrip("@")


def is_valid_email(email: str) -> bool:
    return bool(email) and EMAIL_REGEX.match(email) is not None


def is_valid_domain(domain: str) -> bool:
    return bool(domain) and DOMAIN_REGEX.match(domain) is not None


def email_domain(email: str) -> str:
    """Return the part after the last '@' of an email address."""
    return normalize_email(email).rsplit("@", 1)[-1]


def classify_whitelist_value(
    value: str, entry_type: Optional[str] = None
) -> Tuple[str, str]:
    """Validate and normalize a whitelist value.

    Args:
        value: Raw value typed by the admin.
        entry_type: "email" or "domain". Inferred from the presence of '@'
            (after stripping a leading one) when None.

    Returns:
        Tuple of (entry_type, normalized value).

    Raises:
        ValidationError: If the value is empty or malformed.
    """
    if value is None or not value.strip():
        raise ValidationError("Please enter an email or domain.")

    if entry_type is None:
        entry_type = "email" if "@" in value.strip().lstrip("@") else "domain"

    if entry_type == "email":
        normalized = normalize_email(value)
        if not is_valid_email(normalized):
            raise ValidationError(INVALID_EMAIL_MESSAGE)
        return "email", normalized

    if entry_type == "domain":
        normalized = normalize_domain(value)
        if not is_valid_domain(normalized):
            raise ValidationError(INVALID_DOMAIN_MESSAGE)
        return "domain", normalized

    raise ValidationError(f"Invalid entry type: {entry_type}. Must be 'email' or 'domain'.")
