"""
PasswordResetToken Entity

One-time credential-reset grant.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_iam.domain.base import utcnow
from .enums import PasswordResetStatus, ResetMethod


class PasswordResetToken(SQLModel, table=True):
    """
    PasswordResetToken entity - secure password reset tokens.

    Business Rules:
    - Token is SHA-256 hash of a 32-byte random value
    - Expires after 2 hours (self-service) or 24 hours (admin-initiated)
    - At most one pending token per user; a new request invalidates the old
    - Consumed exactly once (pending -> used)
    """

    __tablename__ = "password_reset_tokens"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(unique=True, max_length=64)  # SHA-256 output

    status: PasswordResetStatus = Field(default=PasswordResetStatus.pending)
    reset_method: ResetMethod = Field(default=ResetMethod.self_service)
    initiated_by: Optional[UUID] = Field(default=None)
    invalidated_reason: Optional[str] = Field(default=None, max_length=255)

    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None, max_length=500)
    used_ip_address: Optional[str] = Field(default=None, max_length=45)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    used_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index(
            "uq_password_reset_pending",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
        Index("idx_password_reset_token_hash", "token_hash"),
        Index("idx_password_reset_user_created", "user_id", "created_at"),
    )
