"""
Change Tenant Status Use Case

Platform operators suspend, deactivate or reactivate a whole tenant.
"""

import logging
from uuid import UUID

from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import AuditEvent, SessionStatus, TenantStatus
from tenant_iam.libs.result import Error, Result, Return
from .dtos import TenantStatusCommand, TenantStatusData, TenantStatusResponse

logger = logging.getLogger(__name__)


class ChangeTenantStatusUseCase:
    """
    Business Rules:
    - Status must be active, inactive or suspended
    - Leaving active invalidates every active session in the tenant
    - Audit event records the transition and the reason
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, tenant_id: UUID, command: TenantStatusCommand
    ) -> Result[TenantStatusResponse]:
        if command.status not in TenantStatus.__members__:
            return Return.err(
                Error(
                    "INVALID_STATUS",
                    f"Invalid status: {command.status}. Must be one of: "
                    f"{', '.join(TenantStatus.__members__)}",
                )
            )

        status = TenantStatus[command.status]
        now = utcnow()

        async with self.uow:
            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", f"Tenant {tenant_id} not found"))

            old_status = tenant.status
            tenant.status = status
            tenant.status_changed_at = now
            await self.uow.tenants.update(tenant)

            invalidated = 0
            if status != TenantStatus.active:
                invalidated = await self.uow.sessions.end_active_by_tenant(
                    tenant_id, SessionStatus.invalidated, now
                )

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    action="tenant_status_changed",
                    event_metadata={
                        "old_status": old_status.value,
                        "new_status": status.value,
                        "reason": command.reason,
                        "sessions_invalidated": invalidated,
                    },
                    created_at=now,
                )
            )
            await self.uow.commit()

        logger.warning(
            f"Tenant {tenant_id} status changed {old_status.value} -> {status.value}, "
            f"{invalidated} session(s) invalidated"
        )

        return Return.ok(
            TenantStatusResponse(
                code="TENANT_STATUS_UPDATED",
                message="Tenant status updated",
                data=TenantStatusData(
                    tenant_id=str(tenant_id),
                    old_status=old_status.value,
                    new_status=status.value,
                    sessions_invalidated=invalidated,
                ),
            )
        )
