"""Embed routes.

Users save embed codes (iframes) and preview them. Moderators, admins and any
role granted embeds:read see every embed; everyone else sees their own.
"""

import html
import logging
from typing import Literal, Optional

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import HTMLResponse

from core.dependencies import CurrentUserDep, EmbedManagerDep, PermissionManagerDep
from core.exceptions import EmbedNotFoundError, InvalidEmbedCodeError
from schemas.embed import CreateEmbedRequest, EmbedInfo, EmbedListResponse, EmbedSource
from schemas.user import UserContext
from utils import roles
from utils.converters import model_to_embed_info
from utils.embed_parser import extract_src_and_title

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/embeds", tags=["Embed"])

PREVIEW_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>html,body{{margin:0;height:100%}}iframe{{border:0;width:100%;height:100%}}</style>
</head>
<body>
<iframe src="{src}" title="{title}" sandbox="allow-scripts allow-same-origin allow-forms allow-popups" referrerpolicy="no-referrer" allowfullscreen></iframe>
</body>
</html>
"""


def _can_read_all(current_user: UserContext, permissions) -> bool:
    return roles.is_moderator(current_user) or permissions.check_user_permission(
        current_user, "embeds", "read"
    )


def _get_visible_embed(embed_manager, embed_id: str, current_user: UserContext, permissions):
    try:
        model = embed_manager.get_embed(embed_id)
    except EmbedNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Embed not found")
    if model.owner_id != current_user.user_id and not _can_read_all(current_user, permissions):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own embeds.",
        )
    return model


@router.post("", response_model=EmbedInfo, status_code=201, summary="Save an embed")
def create_embed(
    req: CreateEmbedRequest,
    current_user: CurrentUserDep,
    embed_manager: EmbedManagerDep,
    permissions: PermissionManagerDep,
) -> EmbedInfo:
    if not permissions.check_user_permission(current_user, "embeds", "write"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Your role cannot add embeds.",
        )
    try:
        model = embed_manager.add_embed(
            owner_id=current_user.user_id,
            embed_code=req.embed_code,
            owner_email=current_user.email,
        )
    except InvalidEmbedCodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return model_to_embed_info(model)


@router.get("", response_model=EmbedListResponse, summary="List embeds")
def list_embeds(
    current_user: CurrentUserDep,
    embed_manager: EmbedManagerDep,
    permissions: PermissionManagerDep,
    search: Optional[str] = None,
    sort_by: Literal["created_at", "title"] = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
) -> EmbedListResponse:
    """List embeds visible to the caller.

    Roles holding embeds:read (moderators, guests and admins by default) list
    every embed; other roles list their own.
    """
    owner_id = None if _can_read_all(current_user, permissions) else current_user.user_id
    models = embed_manager.list_embeds(
        owner_id=owner_id, search=search, sort_by=sort_by, sort_order=sort_order
    )
    return EmbedListResponse(embeds=[model_to_embed_info(m) for m in models])


@router.post("/preview", response_model=EmbedSource, summary="Validate embed code")
def preview_embed_code(req: CreateEmbedRequest, current_user: CurrentUserDep) -> EmbedSource:
    """Parse embed code without saving it."""
    try:
        return extract_src_and_title(req.embed_code)
    except InvalidEmbedCodeError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/{embed_id}", response_model=EmbedInfo, summary="Get an embed")
def get_embed(
    embed_id: str,
    current_user: CurrentUserDep,
    embed_manager: EmbedManagerDep,
    permissions: PermissionManagerDep,
) -> EmbedInfo:
    model = _get_visible_embed(embed_manager, embed_id, current_user, permissions)
    return model_to_embed_info(model)


@router.get(
    "/{embed_id}/preview",
    response_class=HTMLResponse,
    summary="Preview an embed in a sandboxed page",
)
def preview_embed(
    embed_id: str,
    current_user: CurrentUserDep,
    embed_manager: EmbedManagerDep,
    permissions: PermissionManagerDep,
) -> HTMLResponse:
    model = _get_visible_embed(embed_manager, embed_id, current_user, permissions)
    page = PREVIEW_TEMPLATE.format(
        src=html.escape(model.embed_url, quote=True),
        title=html.escape(model.title, quote=True),
    )
    return HTMLResponse(content=page)


@router.delete("/{embed_id}", summary="Delete an embed")
def delete_embed(
    embed_id: str,
    current_user: CurrentUserDep,
    embed_manager: EmbedManagerDep,
) -> dict:
    """Delete an embed.

    Permission requirements:
    - Owner: can delete their own embeds
    - Admin/Moderator: can delete any embed
    """
    try:
        model = embed_manager.get_embed(embed_id)
    except EmbedNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Embed not found")
    if model.owner_id != current_user.user_id and not roles.is_moderator(current_user):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only delete your own embeds.",
        )
    embed_manager.delete_embed(embed_id)
    return {"success": True, "message": "Embed deleted successfully"}
