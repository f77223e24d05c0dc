"""
Permission Resolver

Resolves a user's effective ``resource:action`` set inside a tenant by
explicit queries: active UserRole -> RolePermission(is_granted) ->
Permission(is_active). No caching; every check is a fresh query and is
recorded as a PermissionCheck row.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.entities import CheckResult, PermissionCheck, Role

NO_ACTIVE_ROLE = "no_active_role"
UNKNOWN_PERMISSION = "unknown_permission"
NOT_GRANTED = "permission_not_granted"


@dataclass
class PermissionDecision:
    granted: bool
    reason: Optional[str] = None


class PermissionResolver:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def get_role(self, user_id: UUID, tenant_id: UUID, now: datetime) -> Optional[Role]:
        grant = await self.uow.user_roles.get_active(user_id, tenant_id)
        if grant is None or not grant.is_effective(now):
            return None
        return await self.uow.roles.get_by_id(grant.role_id)

    async def get_user_permissions(
        self, user_id: UUID, tenant_id: UUID, now: datetime
    ) -> List[str]:
        """Empty list, not an error, when the user holds no effective role"""
        grant = await self.uow.user_roles.get_active(user_id, tenant_id)
        if grant is None or not grant.is_effective(now):
            return []
        return await self.uow.permissions.get_granted_names(grant.role_id, tenant_id)

    async def check(
        self,
        user_id: UUID,
        tenant_id: UUID,
        permission_name: str,
        now: datetime,
        resource_context: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> PermissionDecision:
        permission = await self.uow.permissions.get_by_name(permission_name)
        grant = await self.uow.user_roles.get_active(user_id, tenant_id)

        if grant is None or not grant.is_effective(now):
            decision = PermissionDecision(granted=False, reason=NO_ACTIVE_ROLE)
        elif permission is None or not permission.is_active:
            decision = PermissionDecision(granted=False, reason=UNKNOWN_PERMISSION)
        else:
            granted = await self.uow.permissions.get_granted_names(grant.role_id, tenant_id)
            if permission_name in granted:
                decision = PermissionDecision(granted=True)
            else:
                decision = PermissionDecision(granted=False, reason=NOT_GRANTED)

        await self.uow.permission_checks.create(
            PermissionCheck(
                user_id=user_id,
                tenant_id=tenant_id,
                permission_id=permission.id if permission is not None else None,
                permission_name=permission_name,
                check_result=CheckResult.granted if decision.granted else CheckResult.denied,
                denial_reason=decision.reason,
                resource_context=resource_context,
                ip_address=ip_address,
                user_agent=user_agent,
                created_at=now,
            )
        )
        return decision
