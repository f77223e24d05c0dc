"""
UserSession Entity

One login's live credential.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import text
from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_iam.domain.base import utcnow
from .enums import LoginMethod, SessionStatus


class UserSession(SQLModel, table=True):
    """
    UserSession entity - server-side record behind a bearer token.

    Business Rules:
    - Token stored as SHA-256 hash; plaintext goes to the client once
    - At most one active session per user (partial unique index)
    - active -> expired | invalidated | logged_out, all terminal
    - Expires after 8 hours, 30 days with remember-me,
      1 hour for restricted password-change sessions
    """

    __tablename__ = "user_sessions"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    token_hash: str = Field(unique=True, index=True, max_length=64)  # SHA-256 output
    user_id: UUID = Field(foreign_key="users.id", nullable=False, index=True)
    tenant_id: UUID = Field(foreign_key="tenants.id", nullable=False, index=True)

    status: SessionStatus = Field(default=SessionStatus.active)
    login_method: LoginMethod = Field(default=LoginMethod.email_password)
    remember_me: bool = Field(default=False)

    ip_address: Optional[str] = Field(default=None, max_length=45)
    user_agent: Optional[str] = Field(default=None, max_length=500)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime, nullable=False))
    last_activity_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    ended_at: Optional[datetime] = Field(
        default=None, sa_column=Column(DateTime, nullable=True)
    )

    __table_args__ = (
        Index(
            "uq_user_session_active",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
        Index("idx_user_session_expires_at", "expires_at"),
        Index("idx_user_session_tenant_status", "tenant_id", "status"),
    )

    @property
    def is_restricted(self) -> bool:
        return self.login_method == LoginMethod.password_reset
