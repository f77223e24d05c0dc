from tenant_iam.adapter.repositories.base import SqlModelRepository
from tenant_iam.app.repositories.permission_check_repository import IPermissionCheckRepository
from tenant_iam.domain.entities import PermissionCheck


class PermissionCheckRepository(SqlModelRepository, IPermissionCheckRepository):
    """SQLModel implementation of the permission check audit log"""

    async def create(self, check: PermissionCheck) -> PermissionCheck:
        return await self._save(check, "permission check insert")
