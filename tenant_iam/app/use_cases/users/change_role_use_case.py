"""
Change User Role Use Case

Handles moving a user to another role within their tenant.
"""

from typing import Optional
from uuid import UUID

from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import AuditEvent, RoleName, UserRole
from tenant_iam.domain.permission_catalog import can_assign, outranks
from tenant_iam.libs.result import Error, Result, Return
from .access import resolve_actor_and_target
from .dtos import RoleChangeData, RoleChangeResponse


class ChangeRoleUseCase:
    """
    Use case for changing a user's role within a tenant.

    Business Rules:
    - Validate role is one of the five system roles
    - Users cannot change their own role
    - Actor must outrank the target's current role and be allowed to
      hand out the new one
    - Grants are never edited in place: the active grant is deactivated,
      then an existing grant for the new role is reactivated or a new
      one created
    - Creates audit event for compliance tracking
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        actor_user_id: UUID,
        tenant_id: UUID,
        target_user_id: UUID,
        new_role: str,
        reason: Optional[str] = None,
    ) -> Result[RoleChangeResponse]:
        if new_role not in RoleName.__members__:
            return Return.err(
                Error(
                    "INVALID_ROLE",
                    f"Invalid role: {new_role}. Must be one of: {', '.join(RoleName.__members__)}",
                )
            )
        if actor_user_id == target_user_id:
            return Return.err(
                Error("INSUFFICIENT_ROLE_PRIVILEGES", "Users cannot change their own role")
            )

        role_name = RoleName[new_role]
        now = utcnow()

        async with self.uow:
            resolved = await resolve_actor_and_target(
                self.uow, actor_user_id, tenant_id, target_user_id, now
            )
            if resolved.is_err():
                return resolved
            access = resolved.value

            if (
                access.target_role is not None
                and not outranks(access.actor_role, access.target_role)
            ) or not can_assign(access.actor_role, role_name):
                return Return.err(
                    Error(
                        "INSUFFICIENT_ROLE_PRIVILEGES",
                        f"{access.actor_role.value} cannot assign the {role_name.value} role",
                    )
                )

            if access.target_role == role_name:
                return Return.err(
                    Error("INVALID_ROLE", f"User already has the {role_name.value} role")
                )

            role = await self.uow.roles.get_by_name(role_name)
            if role is None:
                return Return.err(Error("ROLE_NOT_FOUND", f"Role {role_name.value} not found"))

            await self.uow.user_roles.deactivate_active(target_user_id, tenant_id, now)

            grant = await self.uow.user_roles.get_grant(target_user_id, role.id, tenant_id)
            if grant is None:
                await self.uow.user_roles.create(
                    UserRole(
                        user_id=target_user_id,
                        role_id=role.id,
                        tenant_id=tenant_id,
                        assigned_by=actor_user_id,
                        assigned_reason=reason or "role_change",
                        created_at=now,
                    )
                )
            else:
                grant.is_active = True
                grant.deactivated_at = None
                grant.expires_at = None
                grant.assigned_by = actor_user_id
                grant.assigned_reason = reason or "role_change"
                await self.uow.user_roles.update(grant)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=target_user_id,
                    actor_user_id=actor_user_id,
                    action="role_changed",
                    event_metadata={
                        "old_role": access.target_role.value if access.target_role else None,
                        "new_role": role_name.value,
                        "reason": reason,
                    },
                    created_at=now,
                )
            )
            await self.uow.commit()

        return Return.ok(
            RoleChangeResponse(
                code="USER_ROLE_UPDATED",
                message="User role updated",
                data=RoleChangeData(
                    user_id=str(target_user_id),
                    old_role=access.target_role.value if access.target_role else None,
                    new_role=role_name.value,
                ),
            )
        )
