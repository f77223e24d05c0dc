"""
Get My Permissions Use Case
"""

from uuid import UUID

from tenant_iam.app.services.permission_resolver import PermissionResolver
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.libs.result import Result, Return
from .dtos import MyPermissionsData, MyPermissionsResponse


class GetMyPermissionsUseCase:
    """Role and sorted permission names of the caller; empty without an active role"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID, tenant_id: UUID) -> Result[MyPermissionsResponse]:
        now = utcnow()
        resolver = PermissionResolver(self.uow)
        async with self.uow:
            role = await resolver.get_role(user_id, tenant_id, now)
            permissions = await resolver.get_user_permissions(user_id, tenant_id, now)
            # read before __aexit__ rolls back and expires the loaded role
            data = MyPermissionsData(
                role_name=role.name.value if role else None,
                permissions=sorted(permissions),
            )

        return Return.ok(
            MyPermissionsResponse(
                code="PERMISSIONS_RETRIEVED",
                message="Permissions retrieved",
                data=data,
            )
        )
