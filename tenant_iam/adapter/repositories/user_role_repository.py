from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.user_role_repository import IUserRoleRepository
from tenant_iam.domain.entities import UserRole


class UserRoleRepository(SqlModelRepository, IUserRoleRepository):
    """UserRole repository implementation using SQLModel"""

    async def get_active(self, user_id: UUID, tenant_id: UUID) -> Optional[UserRole]:
        with translate_store_errors("role grant lookup"):
            stmt = select(UserRole).where(
                UserRole.user_id == user_id,
                UserRole.tenant_id == tenant_id,
                UserRole.is_active == True,  # noqa: E712
            )
            result = await self.session.exec(stmt)
            return result.first()

    async def get_grant(
        self, user_id: UUID, role_id: UUID, tenant_id: UUID
    ) -> Optional[UserRole]:
        with translate_store_errors("role grant lookup"):
            stmt = select(UserRole).where(
                UserRole.user_id == user_id,
                UserRole.role_id == role_id,
                UserRole.tenant_id == tenant_id,
            )
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def create(self, user_role: UserRole) -> UserRole:
        return await self._save(user_role, "role grant insert")

    async def update(self, user_role: UserRole) -> UserRole:
        return await self._save(user_role, "role grant update")

    async def deactivate_active(
        self, user_id: UUID, tenant_id: UUID, now: datetime
    ) -> int:
        with translate_store_errors("role grant deactivation"):
            stmt = (
                update(UserRole)
                .where(
                    UserRole.user_id == user_id,
                    UserRole.tenant_id == tenant_id,
                    UserRole.is_active == True,  # noqa: E712
                )
                .values(is_active=False, deactivated_at=now)
            )
            result = await self.session.execute(stmt)
            await self.session.flush()
            return result.rowcount
