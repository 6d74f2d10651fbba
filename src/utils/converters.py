"""Conversions between ORM models and pydantic schemas."""

from models.embed import EmbedModel
from models.role_permission import RolePermissionModel
from models.user import UserModel
from models.user_preference import UserPreferenceModel
from models.whitelist_entry import WhitelistEntryModel
from schemas.embed import EmbedInfo
from schemas.permission import RolePermissionInfo
from schemas.user import PreferenceInfo, User, UserProfile
from schemas.whitelist import WhitelistEntryInfo


def user_to_model(user: User) -> UserModel:
    return UserModel(**user.model_dump())


def model_to_user(model: UserModel) -> User:
    return User(
        user_id=model.user_id,
        email=model.email,
        password_hash=model.password_hash,
        role=model.role,
        status=model.status,
        first_name=model.first_name,
        last_name=model.last_name,
        avatar_url=model.avatar_url,
        last_login_at=model.last_login_at,
        login_count=model.login_count or 0,
        created_at=model.created_at,
        updated_at=model.updated_at,
        created_by=model.created_by,
        updated_by=model.updated_by,
    )


def user_to_profile(user: User) -> UserProfile:
    return UserProfile(**user.public_dict())


def model_to_embed_info(model: EmbedModel) -> EmbedInfo:
    return EmbedInfo(
        embed_id=model.embed_id,
        title=model.title,
        embed_code=model.embed_code,
        embed_url=model.embed_url,
        owner_id=model.owner_id,
        owner_email=model.owner_email,
        created_at=model.created_at,
    )


def model_to_whitelist_info(model: WhitelistEntryModel) -> WhitelistEntryInfo:
    return WhitelistEntryInfo(
        entry_id=model.entry_id,
        email=model.email,
        domain=model.domain,
        added_at=model.added_at,
        added_by=model.added_by,
    )


def model_to_permission_info(model: RolePermissionModel) -> RolePermissionInfo:
    return RolePermissionInfo(
        role=model.role,
        resource=model.resource,
        action=model.action,
        is_allowed=bool(model.is_allowed),
        created_at=model.created_at,
    )


def model_to_preference_info(model: UserPreferenceModel) -> PreferenceInfo:
    return PreferenceInfo(
        preference_key=model.preference_key,
        preference_value=model.preference_value,
        created_at=model.created_at,
        updated_at=model.updated_at,
    )
