from typing import Optional
from uuid import UUID

from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.tenant_repository import ITenantRepository
from tenant_iam.domain.entities import Tenant


class TenantRepository(SqlModelRepository, ITenantRepository):
    """Tenant repository implementation using SQLModel"""

    async def get_by_id(self, tenant_id: UUID) -> Optional[Tenant]:
        """Get tenant by ID"""
        with translate_store_errors("tenant lookup"):
            result = await self.session.exec(select(Tenant).where(Tenant.id == tenant_id))
            return result.one_or_none()

    async def create(self, tenant: Tenant) -> Tenant:
        return await self._save(tenant, "tenant insert")

    async def update(self, tenant: Tenant) -> Tenant:
        return await self._save(tenant, "tenant update")
