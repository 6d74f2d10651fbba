from sqlalchemy import Column, String, Text
from .base import Base


class EmbedModel(Base):
    __tablename__ = "embeds"

    embed_id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False)
    embed_code = Column(Text, nullable=False)
    embed_url = Column(String, nullable=False)  # src attribute of the embed code
    owner_id = Column(String, index=True, nullable=False)
    owner_email = Column(String, nullable=True)
    created_at = Column(String, nullable=False)
