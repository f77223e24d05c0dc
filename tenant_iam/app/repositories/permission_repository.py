from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from tenant_iam.domain.entities import Permission


class IPermissionRepository(ABC):
    """Permission repository interface - application layer"""

    @abstractmethod
    async def get_by_name(self, name: str) -> Optional[Permission]:
        """Get permission by its resource:action name"""
        pass

    @abstractmethod
    async def list_all(self) -> List[Permission]:
        """List the whole permission catalog"""
        pass

    @abstractmethod
    async def create(self, permission: Permission) -> Permission:
        """Create a new catalog permission"""
        pass

    @abstractmethod
    async def get_granted_names(self, role_id: UUID, tenant_id: UUID) -> List[str]:
        """
        Names of active permissions granted to a role inside a tenant.

        Joins RolePermission(is_granted) with Permission(is_active),
        ordered by name.
        """
        pass
