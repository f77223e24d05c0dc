from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

from tenant_iam.domain.entities import AuditEvent


class IAuditEventRepository(ABC):
    """Audit event repository interface (append-only)"""

    @abstractmethod
    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        """Create a new audit event"""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: UUID) -> List[AuditEvent]:
        """List audit events about a user, oldest first"""
        pass
