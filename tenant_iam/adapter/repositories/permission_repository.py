from typing import List, Optional
from uuid import UUID

from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.permission_repository import IPermissionRepository
from tenant_iam.domain.entities import Permission, RolePermission


class PermissionRepository(SqlModelRepository, IPermissionRepository):
    """Permission repository implementation using SQLModel"""

    async def get_by_name(self, name: str) -> Optional[Permission]:
        with translate_store_errors("permission lookup"):
            stmt = select(Permission).where(Permission.name == name)
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def list_all(self) -> List[Permission]:
        with translate_store_errors("permission listing"):
            result = await self.session.exec(select(Permission).order_by(Permission.name))
            return list(result.all())

    async def create(self, permission: Permission) -> Permission:
        return await self._save(permission, "permission insert")

    async def get_granted_names(self, role_id: UUID, tenant_id: UUID) -> List[str]:
        """Explicit join instead of relationship loading"""
        with translate_store_errors("permission resolution"):
            stmt = (
                select(Permission.name)
                .join(RolePermission, RolePermission.permission_id == Permission.id)
                .where(
                    RolePermission.role_id == role_id,
                    RolePermission.tenant_id == tenant_id,
                    RolePermission.is_granted == True,  # noqa: E712
                    Permission.is_active == True,  # noqa: E712
                )
                .order_by(Permission.name)
            )
            result = await self.session.exec(stmt)
            return list(result.all())
