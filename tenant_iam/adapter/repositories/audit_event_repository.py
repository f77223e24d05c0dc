from typing import List
from uuid import UUID

from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.audit_event_repository import IAuditEventRepository
from tenant_iam.domain.entities import AuditEvent


class AuditEventRepository(SqlModelRepository, IAuditEventRepository):
    """SQLModel implementation of audit event repository"""

    async def create(self, audit_event: AuditEvent) -> AuditEvent:
        return await self._save(audit_event, "audit event insert")

    async def list_by_user(self, user_id: UUID) -> List[AuditEvent]:
        with translate_store_errors("audit event listing"):
            stmt = (
                select(AuditEvent)
                .where(AuditEvent.user_id == user_id)
                .order_by(AuditEvent.created_at)
            )
            result = await self.session.exec(stmt)
            return list(result.all())
