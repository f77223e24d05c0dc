"""
User Entity

An account owned by exactly one tenant.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_iam.domain.base import utcnow
from .enums import UserStatus


class User(SQLModel, table=True):
    """
    User entity - account belonging to a single tenant.

    Business Rules:
    - Email is unique across the platform (stored lower-cased)
    - Password stored as bcrypt hash (cost factor 12)
    - login_attempts / locked_until / lock_reason drive account lockout
    - password_reset_required restricts the next login to a password change
    - Retired through status, never physically deleted
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    full_name: str = Field(max_length=100)
    email: str = Field(unique=True, index=True, max_length=320)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    status: UserStatus = Field(default=UserStatus.pending_verification)

    # Lockout
    login_attempts: int = Field(default=0)
    locked_until: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
    lock_reason: Optional[str] = Field(default=None, max_length=255)

    # Credential lifecycle
    password_reset_required: bool = Field(default=False)
    password_changed_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
    email_verified_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )
    last_login_ip: Optional[str] = Field(default=None, max_length=45)

    __table_args__ = (
        Index("idx_user_tenant_status", "tenant_id", "status"),
    )

    def is_locked(self, now: datetime) -> bool:
        return self.locked_until is not None and self.locked_until > now
