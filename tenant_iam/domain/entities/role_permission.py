"""
RolePermission Entity

Tenant-scoped grant or deny of a permission to a role.
"""

from datetime import datetime
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_iam.domain.base import utcnow


class RolePermission(SQLModel, table=True):
    """
    RolePermission entity - seeded per tenant at tenant creation.
    """

    __tablename__ = "role_permissions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    role_id: UUID = Field(foreign_key="roles.id", nullable=False)
    permission_id: UUID = Field(foreign_key="permissions.id", nullable=False)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    is_granted: bool = Field(default=True)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index(
            "uq_role_permission_tenant",
            "role_id",
            "permission_id",
            "tenant_id",
            unique=True,
        ),
        Index("idx_role_permission_role_tenant", "role_id", "tenant_id"),
    )
