from typing import Optional

from fastapi import BackgroundTasks, Depends, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from tenant_iam.adapter.services.notifier import BackgroundNotifier, LoggingNotifier
from tenant_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tenant_iam.api.error import ClientError, raise_for_error
from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.notifier import Notifier
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import SessionContext
from tenant_iam.app.services.tenant_seeder import DefaultTenantSeeder
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.app.use_cases.auth import ValidateSessionUseCase
from tenant_iam.app.use_cases.permissions import CheckPermissionCommand, CheckPermissionUseCase
from tenant_iam.libs.result import Error

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer(auto_error=False)

_policy = SecurityPolicy.from_config(ApplicationConfig)
_credentials = CredentialEngine(rounds=_policy.bcrypt_rounds)
_notifier = LoggingNotifier()


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_policy() -> SecurityPolicy:
    return _policy


def get_credentials() -> CredentialEngine:
    return _credentials


def get_notifier() -> Notifier:
    return _notifier


def get_deferred_notifier(
    background_tasks: BackgroundTasks, notifier: Notifier = Depends(get_notifier)
) -> Notifier:
    """Notifier whose sends run after the response, outside run_with_timeout"""
    return BackgroundNotifier(notifier, background_tasks)


async def get_tenant_seeder():
    # separate session: a seeding rollback must not touch the registration
    async with AsyncSessionLocal() as session:
        yield DefaultTenantSeeder(SqlAlchemyUnitOfWork(session))


def get_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """Bearer header first, then the session cookie"""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(ApplicationConfig.SESSION_COOKIE_NAME)


async def get_current_session(
    token: Optional[str] = Depends(get_session_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    policy: SecurityPolicy = Depends(get_policy),
) -> SessionContext:
    """
    Resolve the caller's session. Restricted (password-change) sessions
    pass; only the change-password route should depend on this directly.

    Raises:
        ClientError: 401 without a usable session, 403 for a deactivated
        account or an inactive tenant
    """
    if not token:
        raise ClientError(
            Error("UNAUTHORIZED", "Authentication required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    result = await ValidateSessionUseCase(uow, credentials, policy).execute(token)
    if result.is_err():
        raise_for_error(result.error)
    return result.value


async def get_active_session(
    context: SessionContext = Depends(get_current_session),
) -> SessionContext:
    """Full session required; a restricted session may only change its password"""
    if context.is_restricted:
        raise ClientError(
            Error("PASSWORD_CHANGE_REQUIRED", "Password must be changed before continuing"),
            status_code=status.HTTP_403_FORBIDDEN,
        )
    return context


def require_permission(permission_name: str):
    """
    Dependency factory gating a route on one ``resource:action``
    permission in the caller's tenant. Every evaluation is recorded.
    """

    async def dependency(
        request: Request,
        context: SessionContext = Depends(get_active_session),
        uow: UnitOfWork = Depends(get_unit_of_work),
    ) -> SessionContext:
        result = await CheckPermissionUseCase(uow).execute(
            context.user.id,
            context.tenant.id,
            CheckPermissionCommand(permission_name=permission_name),
            ip_address=request.client.host if request.client else None,
            user_agent=request.headers.get("user-agent"),
        )
        if result.is_err():
            raise_for_error(result.error)
        if not result.value.data.granted:
            raise ClientError(
                Error(
                    "PERMISSION_DENIED",
                    "You do not have permission to perform this action",
                    {"permission": permission_name, "reason": result.value.data.reason},
                ),
                status_code=status.HTTP_403_FORBIDDEN,
            )
        return context

    return dependency
