"""Whitelist schema definitions."""

from typing import List, Literal, Optional

from pydantic import BaseModel

WhitelistEntryType = Literal["email", "domain"]


class AddWhitelistEntryRequest(BaseModel):
    value: str
    # Inferred from the value when omitted
    entry_type: Optional[WhitelistEntryType] = None


class WhitelistEntryInfo(BaseModel):
    entry_id: str
    email: Optional[str] = None
    domain: Optional[str] = None
    added_at: str
    added_by: Optional[str] = None


class WhitelistListResponse(BaseModel):
    entries: List[WhitelistEntryInfo]


class WhitelistCheckResponse(BaseModel):
    email: str
    is_whitelisted: bool
