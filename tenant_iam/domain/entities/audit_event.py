"""
AuditEvent Entity

Immutable log of account lifecycle events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import JSON, Column, DateTime, Field, Index, SQLModel

from tenant_iam.domain.base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - registration, verification, resets, role and
    status changes.

    Business Rules:
    - Immutable (never updated or deleted)
    - actor_user_id is the user who performed the action; user_id the subject
    - tenant_id nullable for events raised before a tenant is known
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: Optional[UUID] = Field(default=None, index=True)
    user_id: Optional[UUID] = Field(default=None, index=True)
    actor_user_id: Optional[UUID] = Field(default=None)

    action: str = Field(max_length=100)  # e.g. "user_registered"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_event_tenant_action", "tenant_id", "action"),
        Index("idx_audit_event_created_at", "created_at"),
    )
