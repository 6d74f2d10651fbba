from sqlalchemy import Boolean, Column, Integer, String, UniqueConstraint
from .base import Base


class RolePermissionModel(Base):
    __tablename__ = "role_permissions"
    __table_args__ = (
        UniqueConstraint("role", "resource", "action", name="uq_role_resource_action"),
    )

    id = Column(Integer, primary_key=True, index=True)
    role = Column(String, index=True, nullable=False)
    resource = Column(String, nullable=False)
    action = Column(String, nullable=False)
    is_allowed = Column(Boolean, nullable=False, default=False)
    created_at = Column(String, nullable=False)
