from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.email_verification_repository import (
    IEmailVerificationRepository,
)
from tenant_iam.domain.entities import EmailVerification, EmailVerificationStatus


class EmailVerificationRepository(SqlModelRepository, IEmailVerificationRepository):
    """SQLModel implementation of email verification repository"""

    async def create(self, verification: EmailVerification) -> EmailVerification:
        return await self._save(verification, "verification insert")

    async def get_by_token_hash(self, token_hash: str) -> Optional[EmailVerification]:
        with translate_store_errors("verification lookup"):
            stmt = select(EmailVerification).where(
                EmailVerification.token_hash == token_hash
            )
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def update(self, verification: EmailVerification) -> EmailVerification:
        return await self._save(verification, "verification update")

    async def expire_pending_by_user(self, user_id: UUID) -> int:
        with translate_store_errors("verification supersede"):
            stmt = (
                update(EmailVerification)
                .where(
                    EmailVerification.user_id == user_id,
                    EmailVerification.status == EmailVerificationStatus.pending,
                )
                .values(status=EmailVerificationStatus.expired)
            )
            result = await self.session.execute(stmt)
            await self.session.flush()
            return result.rowcount

    async def count_created_since(self, user_id: UUID, since: datetime) -> int:
        with translate_store_errors("verification count"):
            stmt = select(func.count(EmailVerification.id)).where(
                EmailVerification.user_id == user_id,
                EmailVerification.created_at >= since,
            )
            result = await self.session.exec(stmt)
            return result.one()
