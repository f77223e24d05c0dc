import pytest
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.domain.entities import Role, UserRole

REPOSITORIES = (
    "tenants",
    "users",
    "roles",
    "permissions",
    "role_permissions",
    "user_roles",
    "sessions",
    "password_reset_tokens",
    "email_verifications",
    "login_attempts",
    "permission_checks",
    "audit_events",
)


def _echo(entity):
    return entity


@pytest.fixture
def mock_uow():
    """UnitOfWork whose repositories answer "nothing found" by default"""
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    for name in REPOSITORIES:
        repository = MagicMock()
        repository.create = AsyncMock(side_effect=_echo)
        repository.update = AsyncMock(side_effect=_echo)
        repository.get_by_id = AsyncMock(return_value=None)
        setattr(uow, name, repository)

    uow.users.get_by_email = AsyncMock(return_value=None)
    uow.users.count_by_tenant = AsyncMock(return_value=0)
    uow.roles.get_by_name = AsyncMock(return_value=None)
    uow.roles.list_all = AsyncMock(return_value=[])
    uow.permissions.get_by_name = AsyncMock(return_value=None)
    uow.permissions.list_all = AsyncMock(return_value=[])
    uow.permissions.get_granted_names = AsyncMock(return_value=[])
    uow.role_permissions.list_by_tenant = AsyncMock(return_value=[])
    uow.role_permissions.create_many = AsyncMock()
    uow.user_roles.get_active = AsyncMock(return_value=None)
    uow.user_roles.get_grant = AsyncMock(return_value=None)
    uow.user_roles.deactivate_active = AsyncMock(return_value=0)
    uow.sessions.get_by_token_hash = AsyncMock(return_value=None)
    uow.sessions.end_active_by_user = AsyncMock(return_value=0)
    uow.sessions.end_active_by_tenant = AsyncMock(return_value=0)
    uow.sessions.list_by_user = AsyncMock(return_value=[])
    uow.password_reset_tokens.get_by_token_hash = AsyncMock(return_value=None)
    uow.password_reset_tokens.invalidate_pending_by_user = AsyncMock(return_value=0)
    uow.password_reset_tokens.count_admin_resets_since = AsyncMock(return_value=0)
    uow.email_verifications.get_by_token_hash = AsyncMock(return_value=None)
    uow.email_verifications.expire_pending_by_user = AsyncMock(return_value=0)
    uow.email_verifications.count_created_since = AsyncMock(return_value=0)
    uow.login_attempts.count_failed_accounts_by_ip = AsyncMock(return_value=0)
    uow.login_attempts.first_failure_by_ip = AsyncMock(return_value=None)
    return uow


@pytest.fixture
def credentials():
    return CredentialEngine(rounds=4)


@pytest.fixture
def policy():
    return SecurityPolicy()


@pytest.fixture
def notifier():
    notifier = MagicMock()
    notifier.is_available = MagicMock(return_value=True)
    notifier.send_verification_email = AsyncMock()
    notifier.send_password_reset_email = AsyncMock()
    notifier.send_welcome_email = AsyncMock()
    notifier.send_status_change_email = AsyncMock()
    return notifier


@pytest.fixture
def assign_roles(mock_uow):
    """Point get_active/get_by_id at a {user_id: RoleName} mapping"""

    def assign(tenant_id, roles_by_user):
        roles = {name: Role(id=uuid4(), name=name) for name in set(roles_by_user.values())}
        grants = {
            user_id: UserRole(user_id=user_id, role_id=roles[name].id, tenant_id=tenant_id)
            for user_id, name in roles_by_user.items()
        }
        by_id = {role.id: role for role in roles.values()}
        mock_uow.user_roles.get_active.side_effect = lambda user_id, _tenant_id: grants.get(user_id)
        mock_uow.roles.get_by_id.side_effect = lambda role_id: by_id.get(role_id)
        mock_uow.roles.get_by_name.side_effect = lambda name: roles.get(name) or Role(name=name)
        return roles

    return assign
