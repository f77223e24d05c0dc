"""
EmailVerification Entity

One-time proof of email ownership.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_iam.domain.base import utcnow
from .enums import EmailVerificationStatus


class EmailVerification(SQLModel, table=True):
    """
    EmailVerification entity.

    Business Rules:
    - Expires 24 hours after creation
    - A new token supersedes (expires) every other pending token of the user
    - Verifying moves the owning user from pending_verification to active
    """

    __tablename__ = "email_verifications"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: UUID = Field(foreign_key="users.id", index=True)
    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 output

    status: EmailVerificationStatus = Field(default=EmailVerificationStatus.pending)
    attempts: int = Field(default=0)

    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None, max_length=500)

    # Timestamps
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    verified_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_email_verification_user_created", "user_id", "created_at"),
    )
