"""Database models package.

Importing this package registers every model with ``Base.metadata``.
"""

from .base import Base
from .embed import EmbedModel
from .role_permission import RolePermissionModel
from .user import UserModel
from .user_preference import UserPreferenceModel
from .whitelist_entry import WhitelistEntryModel

__all__ = [
    "Base",
    "EmbedModel",
    "RolePermissionModel",
    "UserModel",
    "UserPreferenceModel",
    "WhitelistEntryModel",
]
