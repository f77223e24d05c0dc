from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.user_repository import IUserRepository
from tenant_iam.domain.entities import User, UserStatus


class UserRepository(SqlModelRepository, IUserRepository):
    """User repository implementation using SQLModel"""

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        with translate_store_errors("user lookup"):
            stmt = select(User).where(User.email == email.strip().lower())
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        with translate_store_errors("user lookup"):
            result = await self.session.exec(select(User).where(User.id == user_id))
            return result.one_or_none()

    async def create(self, user: User) -> User:
        return await self._save(user, "user insert")

    async def update(self, user: User) -> User:
        return await self._save(user, "user update")

    async def list_by_tenant(self, tenant_id: UUID) -> List[User]:
        with translate_store_errors("user listing"):
            stmt = (
                select(User)
                .where(User.tenant_id == tenant_id)
                .order_by(User.created_at)
            )
            result = await self.session.exec(stmt)
            return list(result.all())

    async def count_by_tenant(self, tenant_id: UUID) -> int:
        with translate_store_errors("user count"):
            stmt = select(func.count(User.id)).where(
                User.tenant_id == tenant_id, User.status != UserStatus.inactive
            )
            result = await self.session.exec(stmt)
            return result.one()
