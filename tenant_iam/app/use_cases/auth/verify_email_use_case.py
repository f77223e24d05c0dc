"""
Verify Email Use Case

Consumes an email verification token and activates the account.
"""

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.token_manager import TokenManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import AuditEvent
from tenant_iam.libs.result import Result, Return
from .dtos import VerifyEmailData, VerifyEmailResponse


class VerifyEmailUseCase:
    """
    Business Rules:
    - Unknown token: INVALID_TOKEN
    - Already verified: ALREADY_VERIFIED
    - Past expiry: TOKEN_EXPIRED, and the token is marked expired
    - Otherwise token verified, user moves pending_verification -> active
    """

    def __init__(
        self, uow: UnitOfWork, credentials: CredentialEngine, policy: SecurityPolicy
    ):
        self.uow = uow
        self.credentials = credentials
        self.policy = policy

    async def execute(self, token: str) -> Result[VerifyEmailResponse]:
        now = utcnow()
        tokens = TokenManager(self.uow, self.credentials, self.policy)

        async with self.uow:
            result = await tokens.verify_email(token, now)
            if result.is_err():
                await self.uow.commit()
                return result

            verification, user = result.value
            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=user.tenant_id,
                    user_id=user.id,
                    actor_user_id=user.id,
                    action="email_verified",
                    event_metadata={"verification_id": str(verification.id)},
                    created_at=now,
                )
            )
            await self.uow.commit()

        return Return.ok(
            VerifyEmailResponse(
                code="EMAIL_VERIFIED_SUCCESS",
                message="Email verified successfully",
                data=VerifyEmailData(
                    user_id=str(user.id),
                    email=user.email,
                    verified_at=verification.verified_at,
                ),
            )
        )
