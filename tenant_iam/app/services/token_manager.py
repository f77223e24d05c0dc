"""
Verification & Reset Token Manager

Two one-time token families with the same shape: the plaintext goes to
the user once, the SHA-256 digest is stored.

EmailVerification:   pending -> verified | expired
PasswordResetToken:  pending -> used | expired | invalidated
"""

from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.entities import (
    EmailVerification,
    EmailVerificationStatus,
    PasswordResetStatus,
    PasswordResetToken,
    ResetMethod,
    User,
    UserStatus,
)
from tenant_iam.libs.result import Error, Result, Return

SUPERSEDED = "superseded_by_new_request"


class TokenManager:
    """Callers own the transaction and commit, as with SessionManager"""

    def __init__(
        self, uow: UnitOfWork, credentials: CredentialEngine, policy: SecurityPolicy
    ):
        self.uow = uow
        self.credentials = credentials
        self.policy = policy

    # ------------------------------------------------------------------
    # Email verification
    # ------------------------------------------------------------------

    async def issue_verification(
        self,
        user_id: UUID,
        now: datetime,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Tuple[str, EmailVerification]:
        await self.uow.email_verifications.expire_pending_by_user(user_id)

        token = self.credentials.random_token(32)
        verification = EmailVerification(
            user_id=user_id,
            token_hash=self.credentials.sha256(token),
            status=EmailVerificationStatus.pending,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=now,
            expires_at=now + self.policy.verification_token_duration,
        )
        verification = await self.uow.email_verifications.create(verification)
        return token, verification

    async def can_resend_verification(self, user_id: UUID, now: datetime) -> bool:
        since = now - self.policy.verification_resend_window
        recent = await self.uow.email_verifications.count_created_since(user_id, since)
        return recent < self.policy.max_verification_resends

    async def verify_email(
        self, token: str, now: datetime
    ) -> Result[Tuple[EmailVerification, User]]:
        verification = await self.uow.email_verifications.get_by_token_hash(
            self.credentials.sha256(token)
        )
        if verification is None:
            return Return.err(Error("INVALID_TOKEN", "Invalid verification token"))

        if verification.status == EmailVerificationStatus.verified:
            return Return.err(Error("ALREADY_VERIFIED", "Email address is already verified"))

        verification.attempts += 1

        if verification.expires_at < now:
            if verification.status == EmailVerificationStatus.pending:
                verification.status = EmailVerificationStatus.expired
            await self.uow.email_verifications.update(verification)
            return Return.err(Error("TOKEN_EXPIRED", "Verification token has expired"))

        if verification.status != EmailVerificationStatus.pending:
            await self.uow.email_verifications.update(verification)
            return Return.err(Error("INVALID_TOKEN", "Invalid verification token"))

        user = await self.uow.users.get_by_id(verification.user_id)
        if user is None:
            return Return.err(Error("INVALID_TOKEN", "Invalid verification token"))

        verification.status = EmailVerificationStatus.verified
        verification.verified_at = now
        verification = await self.uow.email_verifications.update(verification)

        if user.status == UserStatus.pending_verification:
            user.status = UserStatus.active
        user.email_verified_at = now
        user = await self.uow.users.update(user)

        return Return.ok((verification, user))

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    async def issue_reset(
        self,
        user_id: UUID,
        now: datetime,
        reset_method: ResetMethod = ResetMethod.self_service,
        initiated_by: Optional[UUID] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Tuple[str, PasswordResetToken]:
        await self.uow.password_reset_tokens.invalidate_pending_by_user(user_id, SUPERSEDED)

        if reset_method == ResetMethod.self_service:
            ttl = self.policy.reset_token_duration
        else:
            ttl = self.policy.admin_reset_token_duration

        token = self.credentials.random_token(32)
        reset_token = PasswordResetToken(
            user_id=user_id,
            token_hash=self.credentials.sha256(token),
            status=PasswordResetStatus.pending,
            reset_method=reset_method,
            initiated_by=initiated_by,
            ip_address=ip_address,
            user_agent=user_agent,
            created_at=now,
            expires_at=now + ttl,
        )
        reset_token = await self.uow.password_reset_tokens.create(reset_token)
        return token, reset_token

    async def validate_reset(self, token: str, now: datetime) -> Result[PasswordResetToken]:
        reset_token = await self.uow.password_reset_tokens.get_by_token_hash(
            self.credentials.sha256(token)
        )
        if reset_token is None or reset_token.status == PasswordResetStatus.invalidated:
            return Return.err(Error("INVALID_TOKEN", "Invalid or expired reset token"))

        if reset_token.status == PasswordResetStatus.expired:
            return Return.err(Error("TOKEN_EXPIRED", "Reset token has expired"))

        if reset_token.status == PasswordResetStatus.used:
            return Return.err(
                Error("TOKEN_ALREADY_USED", "Reset token has already been used")
            )

        if reset_token.expires_at < now:
            reset_token.status = PasswordResetStatus.expired
            await self.uow.password_reset_tokens.update(reset_token)
            return Return.err(Error("TOKEN_EXPIRED", "Reset token has expired"))

        return Return.ok(reset_token)

    async def consume_reset(
        self, reset_token: PasswordResetToken, now: datetime, ip_address: Optional[str] = None
    ) -> PasswordResetToken:
        reset_token.status = PasswordResetStatus.used
        reset_token.used_at = now
        reset_token.used_ip_address = ip_address
        return await self.uow.password_reset_tokens.update(reset_token)
