"""
Actor/target resolution shared by the user administration use cases.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional
from uuid import UUID

from tenant_iam.app.services.permission_resolver import PermissionResolver
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.entities import RoleName, User
from tenant_iam.libs.result import Error, Result, Return


@dataclass
class ActorAndTarget:
    actor_role: RoleName
    target: User
    target_role: Optional[RoleName]


async def resolve_actor_and_target(
    uow: UnitOfWork,
    actor_user_id: UUID,
    tenant_id: UUID,
    target_user_id: UUID,
    now: datetime,
) -> Result[ActorAndTarget]:
    """
    The target must live in the actor's tenant; a user of another tenant
    is reported as not found.
    """
    resolver = PermissionResolver(uow)

    actor_role = await resolver.get_role(actor_user_id, tenant_id, now)
    if actor_role is None:
        return Return.err(
            Error("INSUFFICIENT_ROLE_PRIVILEGES", "No active role in this tenant")
        )

    target = await uow.users.get_by_id(target_user_id)
    if target is None or target.tenant_id != tenant_id:
        return Return.err(Error("USER_NOT_FOUND", "User not found"))

    target_role = await resolver.get_role(target.id, tenant_id, now)
    return Return.ok(
        ActorAndTarget(
            actor_role=actor_role.name,
            target=target,
            target_role=target_role.name if target_role else None,
        )
    )
