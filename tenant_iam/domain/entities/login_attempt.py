"""
LoginAttempt Entity

Append-only record of one authentication attempt.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from tenant_iam.domain.base import utcnow
from .enums import AttemptType, LoginAttemptStatus


class LoginAttempt(SQLModel, table=True):
    """
    LoginAttempt entity - feeds per-address rate limiting and monitoring.
    """

    __tablename__ = "login_attempts"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    user_id: Optional[UUID] = Field(default=None)
    email: str = Field(max_length=320)
    ip_address: str = Field(max_length=45)
    user_agent: Optional[str] = Field(default=None, max_length=500)

    attempt_type: AttemptType = Field(default=AttemptType.login)
    status: LoginAttemptStatus
    failure_reason: Optional[str] = Field(default=None, max_length=500)

    tenant_context: Optional[UUID] = Field(default=None)
    session_id: Optional[UUID] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_login_attempt_ip_created", "ip_address", "created_at"),
        Index("idx_login_attempt_email_created", "email", "created_at"),
        Index("idx_login_attempt_status", "status"),
    )
