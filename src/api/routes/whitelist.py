"""Whitelist routes (admin only; the route guard enforces the admin tier)."""

from fastapi import APIRouter, HTTPException, status

from core.dependencies import CurrentUserDep, WhitelistManagerDep
from core.exceptions import ValidationError, WhitelistEntryNotFoundError
from schemas.whitelist import (
    AddWhitelistEntryRequest,
    WhitelistCheckResponse,
    WhitelistEntryInfo,
    WhitelistListResponse,
)
from utils.converters import model_to_whitelist_info
from utils.validators import normalize_email
from utils.whitelist_manager import DuplicateWhitelistEntryError

router = APIRouter(prefix="/api/whitelist", tags=["Whitelist"])


@router.get("", response_model=WhitelistListResponse, summary="List whitelist")
def list_whitelist(whitelist_manager: WhitelistManagerDep) -> WhitelistListResponse:
    entries = whitelist_manager.list_entries()
    return WhitelistListResponse(entries=[model_to_whitelist_info(e) for e in entries])


@router.post("", response_model=WhitelistEntryInfo, status_code=201, summary="Add to whitelist")
def add_whitelist_entry(
    req: AddWhitelistEntryRequest,
    current_user: CurrentUserDep,
    whitelist_manager: WhitelistManagerDep,
) -> WhitelistEntryInfo:
    try:
        model = whitelist_manager.add_entry(
            req.value, entry_type=req.entry_type, added_by=current_user.user_id
        )
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DuplicateWhitelistEntryError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return model_to_whitelist_info(model)


@router.get("/check", response_model=WhitelistCheckResponse, summary="Check an email")
def check_whitelist(email: str, whitelist_manager: WhitelistManagerDep) -> WhitelistCheckResponse:
    return WhitelistCheckResponse(
        email=normalize_email(email),
        is_whitelisted=whitelist_manager.is_whitelisted(email),
    )


@router.delete("/{entry_id}", summary="Remove from whitelist")
def remove_whitelist_entry(entry_id: str, whitelist_manager: WhitelistManagerDep) -> dict:
    try:
        whitelist_manager.remove_entry(entry_id)
    except WhitelistEntryNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Whitelist entry not found",
        )
    return {"success": True, "message": "Removed from whitelist"}
