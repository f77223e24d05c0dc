from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from tenant_iam.domain.entities import RolePermission


class IRolePermissionRepository(ABC):
    """RolePermission repository interface - application layer"""

    @abstractmethod
    async def list_by_tenant(self, tenant_id: UUID) -> List[RolePermission]:
        """List every grant row of a tenant"""
        pass

    @abstractmethod
    async def create_many(self, grants: List[RolePermission]) -> int:
        """Insert grant rows in bulk. Returns count inserted."""
        pass
