from typing import List, Optional
from uuid import UUID

from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.role_repository import IRoleRepository
from tenant_iam.domain.entities import Role, RoleName


class RoleRepository(SqlModelRepository, IRoleRepository):
    """Role repository implementation using SQLModel"""

    async def get_by_id(self, role_id: UUID) -> Optional[Role]:
        with translate_store_errors("role lookup"):
            result = await self.session.exec(select(Role).where(Role.id == role_id))
            return result.one_or_none()

    async def get_by_name(self, name: RoleName) -> Optional[Role]:
        with translate_store_errors("role lookup"):
            result = await self.session.exec(select(Role).where(Role.name == name))
            return result.one_or_none()

    async def list_all(self) -> List[Role]:
        with translate_store_errors("role listing"):
            result = await self.session.exec(select(Role))
            return list(result.all())

    async def create(self, role: Role) -> Role:
        return await self._save(role, "role insert")
