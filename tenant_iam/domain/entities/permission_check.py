"""
PermissionCheck Entity

Audit row for every permission evaluation.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from tenant_iam.domain.base import utcnow
from .enums import CheckResult


class PermissionCheck(SQLModel, table=True):
    __tablename__ = "permission_checks"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(index=True)
    tenant_id: UUID = Field(index=True)
    permission_id: Optional[UUID] = Field(default=None)
    permission_name: str = Field(max_length=100)

    check_result: CheckResult
    denial_reason: Optional[str] = Field(default=None, max_length=255)
    resource_context: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None, max_length=500)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_permission_check_tenant_created", "tenant_id", "created_at"),
    )
