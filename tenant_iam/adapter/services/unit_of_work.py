from sqlmodel.ext.asyncio.session import AsyncSession

from tenant_iam.adapter.repositories.audit_event_repository import AuditEventRepository
from tenant_iam.adapter.repositories.base import translate_store_errors
from tenant_iam.adapter.repositories.email_verification_repository import EmailVerificationRepository
from tenant_iam.adapter.repositories.login_attempt_repository import LoginAttemptRepository
from tenant_iam.adapter.repositories.password_reset_token_repository import PasswordResetTokenRepository
from tenant_iam.adapter.repositories.permission_check_repository import PermissionCheckRepository
from tenant_iam.adapter.repositories.permission_repository import PermissionRepository
from tenant_iam.adapter.repositories.role_permission_repository import RolePermissionRepository
from tenant_iam.adapter.repositories.role_repository import RoleRepository
from tenant_iam.adapter.repositories.tenant_repository import TenantRepository
from tenant_iam.adapter.repositories.user_repository import UserRepository
from tenant_iam.adapter.repositories.user_role_repository import UserRoleRepository
from tenant_iam.adapter.repositories.user_session_repository import UserSessionRepository
from tenant_iam.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        self.tenants = TenantRepository(self.session)
        self.users = UserRepository(self.session)
        self.roles = RoleRepository(self.session)
        self.permissions = PermissionRepository(self.session)
        self.role_permissions = RolePermissionRepository(self.session)
        self.user_roles = UserRoleRepository(self.session)
        self.sessions = UserSessionRepository(self.session)
        self.password_reset_tokens = PasswordResetTokenRepository(self.session)
        self.email_verifications = EmailVerificationRepository(self.session)
        self.login_attempts = LoginAttemptRepository(self.session)
        self.permission_checks = PermissionCheckRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        # Anything not committed inside the block is discarded
        await self.rollback()

    async def commit(self):
        with translate_store_errors("commit"):
            await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
