"""
System permission catalog and default role matrix.

Permission names have the form ``resource:action``. The catalog is seeded
once per deployment; the matrix decides which of those permissions each
system role is granted inside a freshly registered tenant.
"""

from typing import Dict, List, Tuple

from tenant_iam.domain.entities.enums import RoleName

RESOURCE_ACTIONS: Dict[str, Tuple[str, ...]] = {
    "users": ("create", "read", "update", "delete", "manage", "export", "import"),
    "roles": ("create", "read", "update", "manage"),
    "permissions": ("read", "manage"),
    "tenants": ("create", "read", "update", "delete", "manage"),
    "audit": ("read", "export"),
    "dashboard": ("read",),
    "sessions": ("read", "delete", "manage"),
    "profile": ("read", "update"),
    "system": ("read", "update", "manage"),
    "categories": ("create", "read", "update", "delete", "manage"),
    "inventory": ("create", "read", "update", "delete", "manage", "export", "import"),
}

ROLE_DESCRIPTIONS: Dict[RoleName, str] = {
    RoleName.tenant_owner: "Tenant owner with full access",
    RoleName.admin: "Administrator with broad management rights",
    RoleName.manager: "Manager with operational rights",
    RoleName.employee: "Employee with day-to-day access",
    RoleName.staff: "Staff with read-mostly access",
}

# Redirect after a successful full login
ROLE_REDIRECTS: Dict[str, str] = {
    RoleName.tenant_owner.value: "/dashboard/owner",
    RoleName.admin.value: "/dashboard/admin",
    RoleName.manager.value: "/dashboard/manager",
    RoleName.employee.value: "/dashboard/employee",
    RoleName.staff.value: "/dashboard/staff",
}
DEFAULT_REDIRECT = "/dashboard"


def permission_name(resource: str, action: str) -> str:
    return f"{resource}:{action}"


def all_permission_names() -> List[str]:
    return [
        permission_name(resource, action)
        for resource, actions in RESOURCE_ACTIONS.items()
        for action in actions
    ]


def _grant(**resources: Tuple[str, ...]) -> List[str]:
    return [
        permission_name(resource, action)
        for resource, actions in resources.items()
        for action in actions
    ]


ROLE_PERMISSION_MATRIX: Dict[RoleName, List[str]] = {
    RoleName.tenant_owner: all_permission_names(),
    RoleName.admin: _grant(
        users=("create", "read", "update", "delete", "manage", "export"),
        roles=("read", "update", "manage"),
        permissions=("read",),
        tenants=("read", "update"),
        audit=("read", "export"),
        dashboard=("read",),
        sessions=("read", "delete", "manage"),
        profile=("read", "update"),
        system=("read", "update"),
        categories=("create", "read", "update", "delete", "manage"),
        inventory=("create", "read", "update", "delete", "manage", "export"),
    ),
    RoleName.manager: _grant(
        users=("create", "read", "update", "export"),
        roles=("read",),
        permissions=("read",),
        tenants=("read",),
        audit=("read",),
        dashboard=("read",),
        sessions=("read", "delete"),
        profile=("read", "update"),
        system=("read",),
        categories=("create", "read", "update", "delete"),
        inventory=("create", "read", "update", "delete", "export"),
    ),
    RoleName.employee: _grant(
        users=("read",),
        roles=("read",),
        permissions=("read",),
        tenants=("read",),
        dashboard=("read",),
        sessions=("read",),
        profile=("read", "update"),
        inventory=("read", "update"),
    ),
    RoleName.staff: _grant(
        users=("read",),
        dashboard=("read",),
        sessions=("read",),
        profile=("read", "update"),
        inventory=("read",),
    ),
}


def redirect_for_role(role_name: str) -> str:
    return ROLE_REDIRECTS.get(role_name, DEFAULT_REDIRECT)


# Most privileged first
ROLE_HIERARCHY: List[RoleName] = [
    RoleName.tenant_owner,
    RoleName.admin,
    RoleName.manager,
    RoleName.employee,
    RoleName.staff,
]

# Roles each role may hand out when creating users or changing roles
ASSIGNABLE_ROLES: Dict[RoleName, Tuple[RoleName, ...]] = {
    RoleName.tenant_owner: (RoleName.admin, RoleName.manager, RoleName.employee, RoleName.staff),
    RoleName.admin: (RoleName.manager, RoleName.employee, RoleName.staff),
    RoleName.manager: (RoleName.employee, RoleName.staff),
    RoleName.employee: (RoleName.staff,),
    RoleName.staff: (),
}

ACCOUNT_ADMIN_ROLES = (RoleName.tenant_owner, RoleName.admin)


def outranks(actor: RoleName, target: RoleName) -> bool:
    """Strictly higher privilege; equals never outrank each other"""
    return ROLE_HIERARCHY.index(actor) < ROLE_HIERARCHY.index(target)


def can_assign(actor: RoleName, role: RoleName) -> bool:
    return role in ASSIGNABLE_ROLES.get(actor, ())
