"""Embed management utilities."""

import logging
import secrets
from datetime import datetime
from typing import List, Optional

import pytz
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from core.exceptions import EmbedNotFoundError, ValidationError
from models.embed import EmbedModel
from utils.embed_parser import extract_src_and_title

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "created_at": EmbedModel.created_at,
    "title": EmbedModel.title,
}


class EmbedManager:
    """Manages saved embed codes."""

    def __init__(self, db: Session):
        self.db = db

    def add_embed(
        self, owner_id: str, embed_code: str, owner_email: Optional[str] = None
    ) -> EmbedModel:
        """Parse and store an embed code for its owner.

        Raises:
            InvalidEmbedCodeError: If the code has no usable src attribute.
        """
        source = extract_src_and_title(embed_code)
        model = EmbedModel(
            embed_id=secrets.token_hex(8),
            title=source.title,
            embed_code=embed_code.strip(),
            embed_url=source.src,
            owner_id=owner_id,
            owner_email=owner_email,
            created_at=datetime.now(pytz.utc).isoformat(),
        )
        self.db.add(model)
        self.db.commit()
        self.db.refresh(model)
        logger.info("Added embed %s for owner %s", model.embed_id, owner_id)
        return model

    def get_embed(self, embed_id: str) -> EmbedModel:
        model = self.db.query(EmbedModel).filter(EmbedModel.embed_id == embed_id).first()
        if not model:
            raise EmbedNotFoundError(embed_id)
        return model

    def list_embeds(
        self,
        owner_id: Optional[str] = None,
        search: Optional[str] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
    ) -> List[EmbedModel]:
        """List embeds.

        Args:
            owner_id: Only this owner's embeds; every embed when None.
            search: Case-insensitive substring matched against title and URL.
            sort_by: "created_at" or "title".
            sort_order: "asc" or "desc".

        Returns:
            List of EmbedModel instances.

        Raises:
            ValidationError: If sort_by or sort_order is unknown.
        """
        if sort_by not in SORT_FIELDS:
            raise ValidationError(f"Invalid sort field: {sort_by}")
        if sort_order not in ("asc", "desc"):
            raise ValidationError(f"Invalid sort order: {sort_order}")

        query = self.db.query(EmbedModel)
        if owner_id:
            query = query.filter(EmbedModel.owner_id == owner_id)
        if search and search.strip():
            pattern = f"%{search.strip().lower()}%"
            query = query.filter(
                or_(
                    func.lower(EmbedModel.title).like(pattern),
                    func.lower(EmbedModel.embed_url).like(pattern),
                )
            )

        column = SORT_FIELDS[sort_by]
        if sort_by == "title":
            column = func.lower(column)
        ordering = column.asc() if sort_order == "asc" else column.desc()
        return query.order_by(ordering).all()

    def delete_embed(self, embed_id: str) -> None:
        model = self.get_embed(embed_id)
        self.db.delete(model)
        self.db.commit()
        logger.info("Deleted embed: %s", embed_id)
