from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from tenant_iam.domain.entities import Role, RoleName


class IRoleRepository(ABC):
    """Role repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, role_id: UUID) -> Optional[Role]:
        """Get role by ID"""
        pass

    @abstractmethod
    async def get_by_name(self, name: RoleName) -> Optional[Role]:
        """Get role by its fixed name"""
        pass

    @abstractmethod
    async def list_all(self) -> List[Role]:
        """List every system role"""
        pass

    @abstractmethod
    async def create(self, role: Role) -> Role:
        """Create a new role"""
        pass
