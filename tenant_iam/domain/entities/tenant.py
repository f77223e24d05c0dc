"""
Tenant Entity

Represents an isolated customer organization.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_iam.domain.base import utcnow
from .enums import Language, Locale, TenantStatus


class Tenant(SQLModel, table=True):
    """
    Tenant entity - the unit of data partitioning.

    Business Rules:
    - Exactly one tenant is created per self-registration
    - Status gates every user of the tenant regardless of user status
    - Never hard-deleted; retired through status
    """

    __tablename__ = "tenants"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    company_name: str = Field(max_length=200)

    language: Language = Field(default=Language.persian)
    locale: Locale = Field(default=Locale.iran)

    status: TenantStatus = Field(default=TenantStatus.active)
    max_users: int = Field(default=10)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    status_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    __table_args__ = (Index("idx_tenant_status", "status"),)
