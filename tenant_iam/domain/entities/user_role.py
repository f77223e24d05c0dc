"""
UserRole Entity

Grant of one role to one user within one tenant.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_iam.domain.base import utcnow


class UserRole(SQLModel, table=True):
    """
    UserRole entity - append/deactivate-only role grant.

    Business Rules:
    - (user_id, role_id, tenant_id) is unique
    - At most one active grant per (user_id, tenant_id)
    - A role change deactivates the old grant and activates or creates
      the new one; grants are never edited in place
    - A grant past expires_at is treated as inactive
    """

    __tablename__ = "user_roles"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    role_id: UUID = Field(foreign_key="roles.id", nullable=False)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    is_active: bool = Field(default=True)
    assigned_by: Optional[UUID] = Field(default=None)
    assigned_reason: Optional[str] = Field(default=None, max_length=255)
    expires_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    deactivated_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    __table_args__ = (
        Index("uq_user_role_grant", "user_id", "role_id", "tenant_id", unique=True),
        Index(
            "uq_user_role_active",
            "user_id",
            "tenant_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    def is_effective(self, now: datetime) -> bool:
        return self.is_active and (self.expires_at is None or self.expires_at > now)
