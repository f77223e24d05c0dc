"""
Admin Reset Password Use Case

An owner or admin resets another user's password, either by emailing a
24-hour reset link or by setting a generated temporary password.
"""

import logging
from datetime import timedelta
from uuid import UUID

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.login_throttle import LoginThrottle
from tenant_iam.app.services.notifier import Notifier
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import SessionManager
from tenant_iam.app.services.token_manager import TokenManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import AuditEvent, ResetMethod, UserStatus
from tenant_iam.domain.permission_catalog import ACCOUNT_ADMIN_ROLES, outranks
from tenant_iam.libs.result import Error, Result, Return
from .access import resolve_actor_and_target
from .dtos import AdminResetData, AdminResetPasswordResponse

logger = logging.getLogger(__name__)

ADMIN_METHODS = (ResetMethod.admin_reset_link, ResetMethod.admin_temporary_password)


class AdminResetPasswordUseCase:
    """
    Business Rules:
    - Only tenant owners and admins; the actor must outrank the target
      (admins cannot reset owners or other admins)
    - No self-reset through this path
    - Deactivated accounts cannot be reset
    - At most 3 admin resets per target per 24 hours
    - Every active session of the target is invalidated
    - Notification sent after commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        credentials: CredentialEngine,
        notifier: Notifier,
        policy: SecurityPolicy,
    ):
        self.uow = uow
        self.credentials = credentials
        self.notifier = notifier
        self.policy = policy

    async def execute(
        self,
        actor_user_id: UUID,
        tenant_id: UUID,
        target_user_id: UUID,
        reset_method: str,
    ) -> Result[AdminResetPasswordResponse]:
        if reset_method not in {m.value for m in ADMIN_METHODS}:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    "reset_method must be admin_reset_link or admin_temporary_password",
                    {"field": "reset_method"},
                )
            )
        if actor_user_id == target_user_id:
            return Return.err(
                Error("VALIDATION_ERROR", "Use change password to reset your own password")
            )

        method = ResetMethod(reset_method)
        now = utcnow()
        tokens = TokenManager(self.uow, self.credentials, self.policy)
        sessions = SessionManager(self.uow, self.credentials, self.policy)

        async with self.uow:
            resolved = await resolve_actor_and_target(
                self.uow, actor_user_id, tenant_id, target_user_id, now
            )
            if resolved.is_err():
                return resolved
            access = resolved.value
            user = access.target

            if access.actor_role not in ACCOUNT_ADMIN_ROLES or (
                access.target_role is not None
                and not outranks(access.actor_role, access.target_role)
            ):
                return Return.err(
                    Error(
                        "INSUFFICIENT_ROLE_PRIVILEGES",
                        "Not allowed to reset this user's password",
                    )
                )

            if user.status == UserStatus.inactive:
                return Return.err(
                    Error("INVALID_STATUS", "Cannot reset the password of a deactivated user")
                )

            since = now - timedelta(days=1)
            recent = await self.uow.password_reset_tokens.count_admin_resets_since(user.id, since)
            if recent >= self.policy.max_admin_resets_per_day:
                return Return.err(
                    Error(
                        "RATE_LIMIT_EXCEEDED",
                        "Too many password resets for this user today",
                        {"retry_after_seconds": int(timedelta(days=1).total_seconds())},
                    )
                )

            token, reset_token = await tokens.issue_reset(
                user.id, now, reset_method=method, initiated_by=actor_user_id
            )

            temporary_password = None
            if method == ResetMethod.admin_temporary_password:
                temporary_password = self.credentials.generate_temporary_password()
                user.password_hash = self.credentials.hash_password(temporary_password)
                user.password_changed_at = now
                user.password_reset_required = True
                LoginThrottle.clear(user)
                await self.uow.users.update(user)
                # The generated password replaces the link
                await tokens.consume_reset(reset_token, now)

            invalidated = await sessions.invalidate_all(user.id, now)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=user.id,
                    actor_user_id=actor_user_id,
                    action="password_reset_by_admin",
                    event_metadata={
                        "reset_method": method.value,
                        "sessions_invalidated": invalidated,
                    },
                    created_at=now,
                )
            )
            await self.uow.commit()

        try:
            if temporary_password is not None:
                await self.notifier.send_welcome_email(user, temporary_password)
            else:
                await self.notifier.send_password_reset_email(user, token, reset_token.expires_at)
        except Exception:
            logger.exception(f"Admin reset notification failed for user {user.id}")

        return Return.ok(
            AdminResetPasswordResponse(
                code="PASSWORD_RESET_BY_ADMIN",
                message="Password reset initiated",
                data=AdminResetData(
                    user_id=str(user.id),
                    reset_method=method.value,
                    expires_at=None if temporary_password else reset_token.expires_at,
                    sessions_invalidated=invalidated,
                ),
            )
        )
