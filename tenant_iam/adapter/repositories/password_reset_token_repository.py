from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import func, update
from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.password_reset_token_repository import (
    IPasswordResetTokenRepository,
)
from tenant_iam.domain.entities import PasswordResetStatus, PasswordResetToken, ResetMethod


class PasswordResetTokenRepository(SqlModelRepository, IPasswordResetTokenRepository):
    """SQLModel implementation of password reset token repository"""

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        return await self._save(token, "reset token insert")

    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        with translate_store_errors("reset token lookup"):
            stmt = select(PasswordResetToken).where(
                PasswordResetToken.token_hash == token_hash
            )
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def update(self, token: PasswordResetToken) -> PasswordResetToken:
        return await self._save(token, "reset token update")

    async def invalidate_pending_by_user(self, user_id: UUID, reason: str) -> int:
        with translate_store_errors("reset token invalidation"):
            stmt = (
                update(PasswordResetToken)
                .where(
                    PasswordResetToken.user_id == user_id,
                    PasswordResetToken.status == PasswordResetStatus.pending,
                )
                .values(status=PasswordResetStatus.invalidated, invalidated_reason=reason)
            )
            result = await self.session.execute(stmt)
            await self.session.flush()
            return result.rowcount

    async def count_admin_resets_since(self, user_id: UUID, since: datetime) -> int:
        with translate_store_errors("reset token count"):
            stmt = select(func.count(PasswordResetToken.id)).where(
                PasswordResetToken.user_id == user_id,
                PasswordResetToken.reset_method != ResetMethod.self_service,
                PasswordResetToken.created_at >= since,
            )
            result = await self.session.exec(stmt)
            return result.one()
