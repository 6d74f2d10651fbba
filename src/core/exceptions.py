"""Custom exception classes for Embed Manager.

This module defines application-specific exceptions following Google Python
Style Guide.
"""


class EmbedManagerError(Exception):
    """Base exception for all Embed Manager errors."""

    pass


class UserNotFoundError(EmbedManagerError):
    """Raised when a requested user profile cannot be found."""

    def __init__(self, user_id: str):
        """Initialize the exception.

        Args:
            user_id: The ID of the user that was not found.
        """
        self.user_id = user_id
        super().__init__(f"User '{user_id}' not found")


class EmbedNotFoundError(EmbedManagerError):
    """Raised when a requested embed cannot be found."""

    def __init__(self, embed_id: str):
        """Initialize the exception.

        Args:
            embed_id: The ID of the embed that was not found.
        """
        self.embed_id = embed_id
        super().__init__(f"Embed '{embed_id}' not found")


class WhitelistEntryNotFoundError(EmbedManagerError):
    """Raised when a whitelist entry cannot be found."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Whitelist entry '{value}' not found")


class InvalidEmbedCodeError(EmbedManagerError):
    """Raised when pasted embed code has no usable src attribute."""

    pass


class ValidationError(EmbedManagerError):
    """Raised when data validation fails."""

    pass
