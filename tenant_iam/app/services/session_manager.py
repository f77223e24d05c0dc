"""
Session Manager

Issues, validates and ends opaque bearer sessions. Callers own the
transaction: every method runs inside the caller's ``async with uow``
and the caller commits.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.entities import (
    LoginMethod,
    SessionStatus,
    Tenant,
    TenantStatus,
    User,
    UserSession,
    UserStatus,
)
from tenant_iam.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

DEACTIVATED_USER_STATUSES = (UserStatus.inactive, UserStatus.suspended)


@dataclass
class IssuedSession:
    """Plaintext token (returned to the client once) and its stored row"""

    token: str
    session: UserSession


@dataclass
class SessionContext:
    """Everything a request guard learns from a valid session"""

    session: UserSession
    user: User
    tenant: Tenant

    @property
    def is_restricted(self) -> bool:
        return self.session.is_restricted


def tenant_status_error(tenant: Tenant) -> Optional[Error]:
    if tenant.status == TenantStatus.suspended:
        return Error("TENANT_SUSPENDED", "Tenant account is suspended")
    if tenant.status == TenantStatus.inactive:
        return Error("TENANT_INACTIVE", "Tenant account is inactive")
    return None


class SessionManager:
    """
    Business Rules:
    - One active session per user: creating a session invalidates the
      previous one in the same transaction
    - 8 hours by default, 30 days with remember-me, 1 hour for a
      restricted password-change session
    - Logout is idempotent
    """

    def __init__(
        self, uow: UnitOfWork, credentials: CredentialEngine, policy: SecurityPolicy
    ):
        self.uow = uow
        self.credentials = credentials
        self.policy = policy

    def _duration(self, remember_me: bool, restricted: bool):
        if restricted:
            return self.policy.restricted_session_duration
        if remember_me:
            return self.policy.remember_me_duration
        return self.policy.session_duration

    async def create(
        self,
        user: User,
        tenant_id: UUID,
        now: datetime,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
        remember_me: bool = False,
        restricted: bool = False,
    ) -> IssuedSession:
        await self.uow.sessions.end_active_by_user(user.id, SessionStatus.invalidated, now)

        token = self.credentials.random_token(32)
        session = UserSession(
            token_hash=self.credentials.sha256(token),
            user_id=user.id,
            tenant_id=tenant_id,
            status=SessionStatus.active,
            login_method=LoginMethod.password_reset if restricted else LoginMethod.email_password,
            remember_me=remember_me and not restricted,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=now,
            last_activity_at=now,
            expires_at=now + self._duration(remember_me, restricted),
        )
        session = await self.uow.sessions.create(session)
        return IssuedSession(token=token, session=session)

    async def validate(self, token: str, now: datetime) -> Result[SessionContext]:
        session = await self.uow.sessions.get_by_token_hash(self.credentials.sha256(token))
        if session is None or session.status != SessionStatus.active:
            return Return.err(Error("SESSION_EXPIRED", "Session is invalid or has expired"))

        if session.expires_at < now:
            session.status = SessionStatus.expired
            session.ended_at = now
            await self.uow.sessions.update(session)
            return Return.err(Error("SESSION_EXPIRED", "Session is invalid or has expired"))

        user = await self.uow.users.get_by_id(session.user_id)
        if user is None:
            return Return.err(Error("SESSION_EXPIRED", "Session is invalid or has expired"))
        if user.status in DEACTIVATED_USER_STATUSES:
            return Return.err(Error("ACCOUNT_DEACTIVATED", "Account has been deactivated"))

        tenant = await self.uow.tenants.get_by_id(session.tenant_id)
        if tenant is None:
            return Return.err(Error("SESSION_EXPIRED", "Session is invalid or has expired"))
        error = tenant_status_error(tenant)
        if error is not None:
            return Return.err(error)

        session.last_activity_at = now
        session = await self.uow.sessions.update(session)
        return Return.ok(SessionContext(session=session, user=user, tenant=tenant))

    async def invalidate_all(
        self,
        user_id: UUID,
        now: datetime,
        except_session_id: Optional[UUID] = None,
    ) -> int:
        count = await self.uow.sessions.end_active_by_user(
            user_id, SessionStatus.invalidated, now, except_session_id=except_session_id
        )
        if count:
            logger.info(f"Invalidated {count} session(s) for user {user_id}")
        return count

    async def logout(self, token: str, now: datetime) -> bool:
        """Returns True when an active session was ended"""
        session = await self.uow.sessions.get_by_token_hash(self.credentials.sha256(token))
        if session is None or session.status != SessionStatus.active or session.expires_at < now:
            return False

        session.status = SessionStatus.logged_out
        session.ended_at = now
        session.last_activity_at = now
        await self.uow.sessions.update(session)
        return True
