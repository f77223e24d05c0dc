from abc import ABC, abstractmethod

from tenant_iam.app.repositories.audit_event_repository import IAuditEventRepository
from tenant_iam.app.repositories.email_verification_repository import IEmailVerificationRepository
from tenant_iam.app.repositories.login_attempt_repository import ILoginAttemptRepository
from tenant_iam.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from tenant_iam.app.repositories.permission_check_repository import IPermissionCheckRepository
from tenant_iam.app.repositories.permission_repository import IPermissionRepository
from tenant_iam.app.repositories.role_permission_repository import IRolePermissionRepository
from tenant_iam.app.repositories.role_repository import IRoleRepository
from tenant_iam.app.repositories.tenant_repository import ITenantRepository
from tenant_iam.app.repositories.user_repository import IUserRepository
from tenant_iam.app.repositories.user_role_repository import IUserRoleRepository
from tenant_iam.app.repositories.user_session_repository import IUserSessionRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - one transaction per logical operation"""

    # Repository properties (initialized in __aenter__)
    tenants: ITenantRepository
    users: IUserRepository
    roles: IRoleRepository
    permissions: IPermissionRepository
    role_permissions: IRolePermissionRepository
    user_roles: IUserRoleRepository
    sessions: IUserSessionRepository
    password_reset_tokens: IPasswordResetTokenRepository
    email_verifications: IEmailVerificationRepository
    login_attempts: ILoginAttemptRepository
    permission_checks: IPermissionCheckRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
