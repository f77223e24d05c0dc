from abc import ABC, abstractmethod

from tenant_iam.domain.entities import PermissionCheck


class IPermissionCheckRepository(ABC):
    """Permission check audit repository interface (append-only)"""

    @abstractmethod
    async def create(self, check: PermissionCheck) -> PermissionCheck:
        """Record a permission evaluation"""
        pass
