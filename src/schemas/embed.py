"""Embed schema definitions."""

from typing import List, Optional

from pydantic import BaseModel, Field


class CreateEmbedRequest(BaseModel):
    embed_code: str = Field(
        description='Full embed HTML, e.g. <iframe src="https://..." title="..."></iframe>',
    )


class EmbedSource(BaseModel):
    """The parts of an embed code the application keeps."""
    src: str
    title: str


class EmbedInfo(BaseModel):
    embed_id: str
    title: str
    embed_code: str
    embed_url: str
    owner_id: str
    owner_email: Optional[str] = None
    created_at: str


class EmbedListResponse(BaseModel):
    embeds: List[EmbedInfo]
