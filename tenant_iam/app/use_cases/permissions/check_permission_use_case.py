"""
Check Permission Use Case
"""

from typing import Optional
from uuid import UUID

from tenant_iam.app.services.permission_resolver import PermissionResolver
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.libs.result import Error, Result, Return
from .dtos import CheckPermissionCommand, CheckPermissionResponse, PermissionCheckData


class CheckPermissionUseCase:
    """
    Business Rules:
    - Permission name must have the form resource:action
    - A denial is a normal answer (granted=False with a reason), not an error
    - Every check is recorded, granted or denied
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        user_id: UUID,
        tenant_id: UUID,
        command: CheckPermissionCommand,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Result[CheckPermissionResponse]:
        name = command.permission_name.strip()
        resource, _, action = name.partition(":")
        if not resource or not action:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    "permission_name must have the form resource:action",
                    {"field": "permission_name"},
                )
            )

        async with self.uow:
            decision = await PermissionResolver(self.uow).check(
                user_id,
                tenant_id,
                name,
                utcnow(),
                resource_context=command.resource_context,
                ip_address=ip_address,
                user_agent=user_agent,
            )
            await self.uow.commit()

        return Return.ok(
            CheckPermissionResponse(
                code="PERMISSION_GRANTED" if decision.granted else "PERMISSION_DENIED",
                message="Permission granted" if decision.granted else "Permission denied",
                data=PermissionCheckData(
                    permission_name=name,
                    granted=decision.granted,
                    reason=decision.reason,
                ),
            )
        )
