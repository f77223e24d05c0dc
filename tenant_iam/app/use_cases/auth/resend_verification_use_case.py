"""
Resend Verification Use Case

Issues a fresh email verification token, superseding the pending one.
"""

import logging
from typing import Optional

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.notifier import Notifier
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.token_manager import TokenManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import UserStatus
from tenant_iam.libs.result import Result, Return
from .dtos import MessageResponse
from .validation import normalize_email

logger = logging.getLogger(__name__)

VERIFICATION_SENT = MessageResponse(
    code="VERIFICATION_EMAIL_SENT_SUCCESS",
    message="If the account needs verification, a new email has been sent",
)


class ResendVerificationUseCase:
    """
    Business Rules:
    - At most 3 tokens per user per 15 minutes
    - The same success response for unknown, already verified and
      rate-limited accounts
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
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[MessageResponse]:
        email = normalize_email(email)
        now = utcnow()
        tokens = TokenManager(self.uow, self.credentials, self.policy)

        async with self.uow:
            user = await self.uow.users.get_by_email(email)
            if user is None:
                return Return.ok(VERIFICATION_SENT)

            if user.email_verified_at is not None or user.status != UserStatus.pending_verification:
                return Return.ok(VERIFICATION_SENT)

            if not await tokens.can_resend_verification(user.id, now):
                logger.warning(f"Verification resend limit reached for user {user.id}")
                return Return.ok(VERIFICATION_SENT)

            token, _ = await tokens.issue_verification(user.id, now, ip_address, user_agent)
            await self.uow.commit()

        try:
            await self.notifier.send_verification_email(user, token)
        except Exception:
            logger.exception(f"Verification email failed for user {user.id}")

        return Return.ok(VERIFICATION_SENT)
