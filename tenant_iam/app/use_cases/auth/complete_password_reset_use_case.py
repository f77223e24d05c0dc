"""
Complete Password Reset Use Case

Consumes a reset token and sets the new password.
"""

import logging
from typing import Optional

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.login_throttle import LoginThrottle
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import SessionManager
from tenant_iam.app.services.token_manager import TokenManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import AuditEvent
from tenant_iam.libs.result import Error, Result, Return
from .dtos import PasswordResetCompleteResponse, RedirectData
from .validation import validate_password

logger = logging.getLogger(__name__)


class CompletePasswordResetUseCase:
    """
    Business Rules:
    - Token must exist, be pending and unexpired
      (INVALID_TOKEN / TOKEN_ALREADY_USED / TOKEN_EXPIRED)
    - New password must satisfy the password policy (INVALID_PASSWORD)
    - In one transaction: rehash, clear lock counters and
      password_reset_required, mark token used, invalidate every
      active session of the user
    """

    def __init__(
        self, uow: UnitOfWork, credentials: CredentialEngine, policy: SecurityPolicy
    ):
        self.uow = uow
        self.credentials = credentials
        self.policy = policy

    async def execute(
        self, token: str, new_password: str, ip_address: Optional[str] = None
    ) -> Result[PasswordResetCompleteResponse]:
        password_error = validate_password(new_password)
        if password_error:
            return Return.err(password_error)

        now = utcnow()
        tokens = TokenManager(self.uow, self.credentials, self.policy)
        sessions = SessionManager(self.uow, self.credentials, self.policy)

        async with self.uow:
            result = await tokens.validate_reset(token, now)
            if result.is_err():
                # Persist the expired flip, if any
                await self.uow.commit()
                return result

            reset_token = result.value
            user = await self.uow.users.get_by_id(reset_token.user_id)
            if user is None:
                return Return.err(Error("INVALID_TOKEN", "Invalid or expired reset token"))

            user.password_hash = self.credentials.hash_password(new_password)
            user.password_changed_at = now
            user.password_reset_required = False
            LoginThrottle.clear(user)
            await self.uow.users.update(user)

            await tokens.consume_reset(reset_token, now, ip_address)
            invalidated = await sessions.invalidate_all(user.id, now)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=user.tenant_id,
                    user_id=user.id,
                    actor_user_id=user.id,
                    action="password_reset_completed",
                    event_metadata={
                        "token_id": str(reset_token.id),
                        "sessions_invalidated": invalidated,
                    },
                    created_at=now,
                )
            )
            await self.uow.commit()

        logger.info(f"Password reset completed for user {user.id}")
        return Return.ok(
            PasswordResetCompleteResponse(
                code="PASSWORD_RESET_SUCCESS",
                message="Password has been reset",
                data=RedirectData(),
            )
        )
