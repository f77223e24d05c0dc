"""
Tenant seeding.

Grants the default role matrix to a freshly registered tenant. Runs
after registration commits, in its own transaction; a failure leaves
the tenant in place without grants and is only logged by the caller.
"""

import logging
from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.entities import RolePermission
from tenant_iam.domain.permission_catalog import ROLE_PERMISSION_MATRIX

logger = logging.getLogger(__name__)


class TenantSeeder(ABC):
    @abstractmethod
    async def seed_tenant(self, tenant_id: UUID, language: str) -> int:
        """Populate per-tenant defaults. Returns count of rows written."""
        pass


class DefaultTenantSeeder(TenantSeeder):
    """Seeds RolePermission rows from the default role matrix (idempotent)"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def seed_tenant(self, tenant_id: UUID, language: str) -> int:
        async with self.uow:
            roles = {role.name: role for role in await self.uow.roles.list_all()}
            permissions = {p.name: p for p in await self.uow.permissions.list_all()}
            existing = {
                (grant.role_id, grant.permission_id)
                for grant in await self.uow.role_permissions.list_by_tenant(tenant_id)
            }

            grants: List[RolePermission] = []
            for role_name, permission_names in ROLE_PERMISSION_MATRIX.items():
                role = roles.get(role_name)
                if role is None:
                    logger.warning(f"Role {role_name.value} missing from catalog, skipping")
                    continue
                for name in permission_names:
                    permission = permissions.get(name)
                    if permission is None or (role.id, permission.id) in existing:
                        continue
                    grants.append(
                        RolePermission(
                            role_id=role.id,
                            permission_id=permission.id,
                            tenant_id=tenant_id,
                            is_granted=True,
                        )
                    )

            if grants:
                await self.uow.role_permissions.create_many(grants)
            await self.uow.commit()

        logger.info(f"Seeded {len(grants)} role grants for tenant {tenant_id} ({language})")
        return len(grants)
