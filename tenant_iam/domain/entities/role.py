"""
Role Entity

Named permission bundle from a fixed set.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from tenant_iam.domain.base import utcnow
from .enums import RoleName


class Role(SQLModel, table=True):
    """
    Role entity - seeded once at start-up, immutable thereafter.
    """

    __tablename__ = "roles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: RoleName = Field(unique=True, index=True)
    description: Optional[str] = Field(default=None, max_length=255)
    is_system_role: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
