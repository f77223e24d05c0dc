"""
Permission Entity

Atomic `resource:action` capability.
"""

from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Field, Index, SQLModel


class Permission(SQLModel, table=True):
    """
    Permission entity - seeded once, immutable.
    """

    __tablename__ = "permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(unique=True, index=True, max_length=100)  # "users:read"
    resource: str = Field(max_length=50)
    action: str = Field(max_length=20)
    description: Optional[str] = Field(default=None, max_length=255)
    is_active: bool = Field(default=True)

    __table_args__ = (Index("idx_permission_resource_action", "resource", "action"),)
