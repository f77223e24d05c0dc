from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from tenant_iam.domain.entities import UserRole


class IUserRoleRepository(ABC):
    """UserRole repository interface - application layer"""

    @abstractmethod
    async def get_active(self, user_id: UUID, tenant_id: UUID) -> Optional[UserRole]:
        """Get the single active grant of a user inside a tenant"""
        pass

    @abstractmethod
    async def get_grant(
        self, user_id: UUID, role_id: UUID, tenant_id: UUID
    ) -> Optional[UserRole]:
        """Get the grant row for a (user, role, tenant) triple, active or not"""
        pass

    @abstractmethod
    async def create(self, user_role: UserRole) -> UserRole:
        """Create a new grant"""
        pass

    @abstractmethod
    async def update(self, user_role: UserRole) -> UserRole:
        """Update existing grant"""
        pass

    @abstractmethod
    async def deactivate_active(
        self, user_id: UUID, tenant_id: UUID, now: datetime
    ) -> int:
        """Deactivate the active grant(s) of a user in a tenant. Returns count."""
        pass
