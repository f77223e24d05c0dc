from typing import List
from uuid import UUID

from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.role_permission_repository import IRolePermissionRepository
from tenant_iam.domain.entities import RolePermission


class RolePermissionRepository(SqlModelRepository, IRolePermissionRepository):
    """RolePermission repository implementation using SQLModel"""

    async def list_by_tenant(self, tenant_id: UUID) -> List[RolePermission]:
        with translate_store_errors("grant listing"):
            stmt = select(RolePermission).where(RolePermission.tenant_id == tenant_id)
            result = await self.session.exec(stmt)
            return list(result.all())

    async def create_many(self, grants: List[RolePermission]) -> int:
        with translate_store_errors("grant insert"):
            self.session.add_all(grants)
            await self.session.flush()
        return len(grants)
