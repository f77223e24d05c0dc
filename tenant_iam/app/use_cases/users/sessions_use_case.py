"""
Session listing and revocation use cases.
"""

from uuid import UUID

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import SessionManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import AuditEvent
from tenant_iam.domain.permission_catalog import outranks
from tenant_iam.libs.result import Error, Result, Return
from .access import resolve_actor_and_target
from .dtos import (
    RevokeSessionsData,
    RevokeSessionsResponse,
    SessionListResponse,
    SessionSummary,
)


class ListSessionsUseCase:
    """Most recent sessions of the caller, newest first"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, user_id: UUID, current_session_id: UUID, limit: int = 20
    ) -> Result[SessionListResponse]:
        async with self.uow:
            sessions = await self.uow.sessions.list_by_user(user_id, limit=limit)
            summaries = [
                SessionSummary(
                    session_id=str(s.id),
                    status=s.status.value,
                    login_method=s.login_method.value,
                    ip_address=s.ip_address,
                    user_agent=s.user_agent,
                    created_at=s.created_at,
                    last_activity_at=s.last_activity_at,
                    expires_at=s.expires_at,
                    is_current=s.id == current_session_id,
                )
                for s in sessions
            ]

        return Return.ok(
            SessionListResponse(
                code="SESSIONS_RETRIEVED",
                message="Sessions retrieved",
                data=summaries,
            )
        )


class RevokeOtherSessionsUseCase:
    """Ends every active session of the caller except the current one"""

    def __init__(
        self, uow: UnitOfWork, credentials: CredentialEngine, policy: SecurityPolicy
    ):
        self.uow = uow
        self.credentials = credentials
        self.policy = policy

    async def execute(
        self, user_id: UUID, current_session_id: UUID
    ) -> Result[RevokeSessionsResponse]:
        now = utcnow()
        async with self.uow:
            sessions = SessionManager(self.uow, self.credentials, self.policy)
            revoked = await sessions.invalidate_all(
                user_id, now, except_session_id=current_session_id
            )
            await self.uow.commit()

        return Return.ok(
            RevokeSessionsResponse(
                code="SESSIONS_REVOKED",
                message="Other sessions revoked",
                data=RevokeSessionsData(revoked_count=revoked),
            )
        )


class RevokeUserSessionsUseCase:
    """
    Business Rules:
    - Target must belong to the actor's tenant
    - Actor must outrank the target; revoking your own sessions goes
      through RevokeOtherSessionsUseCase
    - Audit event recorded
    """

    def __init__(
        self, uow: UnitOfWork, credentials: CredentialEngine, policy: SecurityPolicy
    ):
        self.uow = uow
        self.credentials = credentials
        self.policy = policy

    async def execute(
        self, actor_user_id: UUID, tenant_id: UUID, target_user_id: UUID
    ) -> Result[RevokeSessionsResponse]:
        if actor_user_id == target_user_id:
            return Return.err(
                Error("VALIDATION_ERROR", "Use /sessions/revoke-others for your own sessions")
            )

        now = utcnow()
        async with self.uow:
            resolved = await resolve_actor_and_target(
                self.uow, actor_user_id, tenant_id, target_user_id, now
            )
            if resolved.is_err():
                return resolved
            access = resolved.value

            if access.target_role is not None and not outranks(
                access.actor_role, access.target_role
            ):
                return Return.err(
                    Error(
                        "INSUFFICIENT_ROLE_PRIVILEGES",
                        "Cannot revoke sessions of an equal or higher role",
                    )
                )

            sessions = SessionManager(self.uow, self.credentials, self.policy)
            revoked = await sessions.invalidate_all(target_user_id, now)
            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=target_user_id,
                    actor_user_id=actor_user_id,
                    action="sessions_revoked",
                    event_metadata={"revoked_count": revoked},
                    created_at=now,
                )
            )
            await self.uow.commit()

        return Return.ok(
            RevokeSessionsResponse(
                code="SESSIONS_REVOKED",
                message="User sessions revoked",
                data=RevokeSessionsData(revoked_count=revoked),
            )
        )
