"""
Login Use Case

Authenticates a user by email and password and issues a session token.
"""

import logging

from tenant_iam.app.repositories.errors import DuplicateRecordError
from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.login_throttle import LoginThrottle
from tenant_iam.app.services.permission_resolver import PermissionResolver
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import (
    DEACTIVATED_USER_STATUSES,
    SessionManager,
    tenant_status_error,
)
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import LoginAttemptStatus
from tenant_iam.domain.permission_catalog import redirect_for_role
from tenant_iam.libs.result import Error, Result, Return
from .dtos import LoginCommand, LoginData, LoginResponse
from .validation import normalize_email

logger = logging.getLogger(__name__)

RESTRICTED_ROLE_NAME = "temporary"
CHANGE_PASSWORD_REDIRECT = "/auth/change-password"


class LoginUseCase:
    """
    Use case for user login and session issuance.

    Business Rules (checked in this order):
    - Source address under its failure limit (RATE_LIMIT_EXCEEDED)
    - Account exists (INVALID_CREDENTIALS, same as a wrong password)
    - Account not locked (ACCOUNT_LOCKED with retry_after_minutes)
    - Account not inactive/suspended (ACCOUNT_DEACTIVATED)
    - Tenant active (TENANT_SUSPENDED / TENANT_INACTIVE)
    - Password matches (INVALID_CREDENTIALS, counts towards lockout)
    - password_reset_required: 1-hour restricted session, no permissions
    - Otherwise a full session replacing any active one, counters reset,
      role, permissions and role-derived redirect returned
    - Every attempt is appended to the login attempt log
    """

    def __init__(
        self, uow: UnitOfWork, credentials: CredentialEngine, policy: SecurityPolicy
    ):
        self.uow = uow
        self.credentials = credentials
        self.policy = policy

    async def execute(self, command: LoginCommand) -> Result[LoginResponse]:
        email = normalize_email(command.email)
        ip_address = command.ip_address
        now = utcnow()

        throttle = LoginThrottle(self.uow, self.policy)
        sessions = SessionManager(self.uow, self.credentials, self.policy)
        resolver = PermissionResolver(self.uow)

        async with self.uow:
            # Per-address limit
            error = await throttle.check_address(ip_address, now)
            if error:
                await throttle.record(
                    email, ip_address, LoginAttemptStatus.failed_rate_limited,
                    user_agent=command.user_agent, failure_reason="rate_limited",
                )
                await self.uow.commit()
                return Return.err(error)

            user = await self.uow.users.get_by_email(email)
            if user is None:
                self.credentials.burn_verification(command.password)
                await throttle.record(
                    email, ip_address, LoginAttemptStatus.failed_user_not_found,
                    user_agent=command.user_agent, failure_reason="user_not_found",
                )
                await self.uow.commit()
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            # Per-account lock, checked before the password
            error = throttle.check_lock(user, now)
            if error:
                await throttle.record(
                    email, ip_address, LoginAttemptStatus.failed_account_locked,
                    user_agent=command.user_agent, user_id=user.id,
                    tenant_id=user.tenant_id, failure_reason="account_locked",
                )
                await self.uow.commit()
                return Return.err(error)

            if user.status in DEACTIVATED_USER_STATUSES:
                await throttle.record(
                    email, ip_address, LoginAttemptStatus.failed_account_deactivated,
                    user_agent=command.user_agent, user_id=user.id,
                    tenant_id=user.tenant_id, failure_reason=f"user_{user.status.value}",
                )
                await self.uow.commit()
                return Return.err(Error("ACCOUNT_DEACTIVATED", "Account has been deactivated"))

            tenant = await self.uow.tenants.get_by_id(user.tenant_id)
            error = (
                Error("TENANT_NOT_FOUND", "Tenant not found")
                if tenant is None
                else tenant_status_error(tenant)
            )
            if error:
                await throttle.record(
                    email, ip_address, LoginAttemptStatus.failed_tenant_inactive,
                    user_agent=command.user_agent, user_id=user.id,
                    tenant_id=user.tenant_id, failure_reason=error.code.lower(),
                )
                await self.uow.commit()
                return Return.err(error)

            if not self.credentials.verify_password(command.password, user.password_hash):
                locked = throttle.register_failure(user, now)
                await self.uow.users.update(user)
                await throttle.record(
                    email, ip_address, LoginAttemptStatus.failed_invalid_credentials,
                    user_agent=command.user_agent, user_id=user.id, tenant_id=tenant.id,
                    failure_reason="account_locked_after_failure" if locked else "invalid_password",
                )
                await self.uow.commit()
                return Return.err(Error("INVALID_CREDENTIALS", "Invalid email or password"))

            throttle.clear(user)
            user.last_login_at = now
            user.last_login_ip = ip_address
            restricted = user.password_reset_required

            try:
                issued = await sessions.create(
                    user,
                    tenant.id,
                    now,
                    ip_address=ip_address,
                    user_agent=command.user_agent,
                    remember_me=command.remember_me,
                    restricted=restricted,
                )
                await self.uow.users.update(user)
                await throttle.record(
                    email, ip_address, LoginAttemptStatus.success,
                    user_agent=command.user_agent, user_id=user.id,
                    tenant_id=tenant.id, session_id=issued.session.id,
                )

                if restricted:
                    role_name, permissions = RESTRICTED_ROLE_NAME, []
                    redirect_url = CHANGE_PASSWORD_REDIRECT
                else:
                    role = await resolver.get_role(user.id, tenant.id, now)
                    role_name = role.name.value if role else None
                    permissions = await resolver.get_user_permissions(user.id, tenant.id, now)
                    redirect_url = redirect_for_role(role_name)

                await self.uow.commit()
            except DuplicateRecordError:
                logger.warning(f"Concurrent login collided for user {user.id}")
                return Return.err(
                    Error("SERVICE_UNAVAILABLE", "Another login is in progress, retry")
                )

        if restricted:
            code, message = "PASSWORD_RESET_REQUIRED", "Password change required"
        else:
            code, message = "LOGIN_SUCCESS", "Login successful"

        return Return.ok(
            LoginResponse(
                code=code,
                message=message,
                data=LoginData(
                    user_id=str(user.id),
                    tenant_id=str(tenant.id),
                    email=user.email,
                    full_name=user.full_name,
                    role_name=role_name,
                    permissions=permissions,
                    redirect_url=redirect_url,
                    session_token=issued.token,
                    session_expires_at=issued.session.expires_at,
                    remember_me_enabled=issued.session.remember_me,
                ),
            )
        )
