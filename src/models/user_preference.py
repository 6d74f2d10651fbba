from sqlalchemy import JSON, Column, ForeignKey, Integer, String, UniqueConstraint
from .base import Base


class UserPreferenceModel(Base):
    __tablename__ = "user_preferences"
    __table_args__ = (
        UniqueConstraint("user_id", "preference_key", name="uq_user_preference_key"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.user_id", ondelete="CASCADE"), index=True)
    preference_key = Column(String, nullable=False)
    preference_value = Column(JSON, nullable=True)
    created_at = Column(String, nullable=False)
    updated_at = Column(String, nullable=False)
