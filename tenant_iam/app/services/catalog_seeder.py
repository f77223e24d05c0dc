"""
System catalog seeding: the five roles and the resource:action
permission catalog. Safe to run on every start-up.
"""

import logging

from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.entities import Permission, Role
from tenant_iam.domain.permission_catalog import RESOURCE_ACTIONS, ROLE_DESCRIPTIONS, permission_name

logger = logging.getLogger(__name__)


async def seed_catalog(uow: UnitOfWork) -> int:
    """Insert whatever roles and permissions are missing. Returns count inserted."""
    created = 0
    async with uow:
        existing_roles = {role.name for role in await uow.roles.list_all()}
        for role_name, description in ROLE_DESCRIPTIONS.items():
            if role_name not in existing_roles:
                await uow.roles.create(
                    Role(name=role_name, description=description, is_system_role=True)
                )
                created += 1

        existing_permissions = {p.name for p in await uow.permissions.list_all()}
        for resource, actions in RESOURCE_ACTIONS.items():
            for action in actions:
                name = permission_name(resource, action)
                if name in existing_permissions:
                    continue
                await uow.permissions.create(
                    Permission(
                        name=name,
                        resource=resource,
                        action=action,
                        description=f"{action.capitalize()} {resource}",
                    )
                )
                created += 1

        await uow.commit()

    if created:
        logger.info(f"Seeded {created} catalog rows")
    return created
