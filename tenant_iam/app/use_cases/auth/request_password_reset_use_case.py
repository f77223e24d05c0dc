"""
Request Password Reset Use Case

Issues a self-service reset token and emails the link.
"""

import logging
from typing import Optional

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.login_throttle import LoginThrottle
from tenant_iam.app.services.notifier import Notifier
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import DEACTIVATED_USER_STATUSES
from tenant_iam.app.services.token_manager import TokenManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import AttemptType, AuditEvent, LoginAttemptStatus, ResetMethod
from tenant_iam.libs.result import Result, Return
from .dtos import MessageResponse
from .validation import normalize_email

logger = logging.getLogger(__name__)

LINK_SENT = MessageResponse(
    code="PASSWORD_RESET_LINK_SENT",
    message="If the email exists, a password reset link has been sent",
)


class RequestPasswordResetUseCase:
    """
    Use case for requesting password reset.

    Business Rules:
    - 32-byte random token, only its SHA-256 digest is stored
    - Expires in 2 hours
    - Any earlier pending token of the user is invalidated
    - Identical response whether or not the email exists
    - Email sent after commit; a send failure is logged only
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
        email: str,
        ip_address: str = "unknown",
        user_agent: Optional[str] = None,
    ) -> Result[MessageResponse]:
        email = normalize_email(email)
        now = utcnow()
        throttle = LoginThrottle(self.uow, self.policy)
        tokens = TokenManager(self.uow, self.credentials, self.policy)

        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None or user.status in DEACTIVATED_USER_STATUSES:
                await throttle.record(
                    email,
                    ip_address,
                    LoginAttemptStatus.failed_user_not_found
                    if user is None
                    else LoginAttemptStatus.failed_account_deactivated,
                    user_agent=user_agent,
                    user_id=user.id if user else None,
                    failure_reason="reset_not_issued",
                    attempt_type=AttemptType.password_reset,
                )
                await self.uow.commit()
                logger.info("Password reset requested for unknown or inactive account")
                return Return.ok(LINK_SENT)

            token, reset_token = await tokens.issue_reset(
                user.id,
                now,
                reset_method=ResetMethod.self_service,
                ip_address=ip_address,
                user_agent=user_agent,
            )
            await throttle.record(
                email,
                ip_address,
                LoginAttemptStatus.success,
                user_agent=user_agent,
                user_id=user.id,
                tenant_id=user.tenant_id,
                attempt_type=AttemptType.password_reset,
            )
            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=user.tenant_id,
                    user_id=user.id,
                    actor_user_id=user.id,
                    action="password_reset_requested",
                    event_metadata={"token_id": str(reset_token.id), "method": "self_service"},
                    created_at=now,
                )
            )
            await self.uow.commit()

        try:
            await self.notifier.send_password_reset_email(user, token, reset_token.expires_at)
        except Exception:
            logger.exception(f"Password reset email failed for user {user.id}")

        return Return.ok(LINK_SENT)
