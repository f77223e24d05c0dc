from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from tenant_iam.api.error import raise_for_error
from tenant_iam.api.utils.timeout import run_with_timeout
from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.notifier import Notifier
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import SessionContext
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.app.use_cases.users import (
    AdminResetPasswordResponse,
    AdminResetPasswordUseCase,
    ChangeRoleUseCase,
    ChangeUserStatusUseCase,
    CreateUserCommand,
    CreateUserResponse,
    CreateUserUseCase,
    RevokeSessionsResponse,
    RevokeUserSessionsUseCase,
    RoleChangeResponse,
    StatusChangeResponse,
)
from tenant_iam.depends import (
    get_credentials,
    get_deferred_notifier,
    get_policy,
    get_unit_of_work,
    require_permission,
)

router = APIRouter(prefix="/users", tags=["Users"])


class CreateUserRequest(BaseModel):
    full_name: str = Field(..., description="Full name (2-100 chars)")
    email: str = Field(..., description="Email address, unique across the platform")
    role_name: str = Field(..., description="admin, manager, employee or staff")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=CreateUserResponse)
async def create_user(
    request: CreateUserRequest,
    context: SessionContext = Depends(require_permission("users:create")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    notifier: Notifier = Depends(get_deferred_notifier),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    Create User

    Adds an account to the caller's tenant. The temporary password is
    delivered by email only.

    Raises:
        - 400 Bad Request: Invalid field or role
        - 403 Forbidden: Caller may not assign this role
        - 409 Conflict: Email exists or tenant user limit reached
    """
    use_case = CreateUserUseCase(uow, credentials, notifier, policy)
    result = await run_with_timeout(
        use_case.execute(
            context.user.id, context.tenant.id, CreateUserCommand(**request.model_dump())
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class AdminResetPasswordRequest(BaseModel):
    reset_method: str = Field(
        "admin_reset_link", description="admin_reset_link or admin_temporary_password"
    )


@router.post(
    "/{user_id}/reset-password",
    status_code=status.HTTP_200_OK,
    response_model=AdminResetPasswordResponse,
)
async def admin_reset_password(
    user_id: UUID,
    request: AdminResetPasswordRequest,
    context: SessionContext = Depends(require_permission("users:manage")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    notifier: Notifier = Depends(get_deferred_notifier),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    Admin Password Reset

    Raises:
        - 403 Forbidden: Caller does not outrank the target
        - 404 Not Found: User not in caller's tenant
        - 429 Too Many Requests: 3 admin resets in the last 24 hours
    """
    use_case = AdminResetPasswordUseCase(uow, credentials, notifier, policy)
    result = await run_with_timeout(
        use_case.execute(context.user.id, context.tenant.id, user_id, request.reset_method)
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ChangeStatusRequest(BaseModel):
    status: str = Field(..., description="active, inactive or suspended")
    reason: Optional[str] = Field(None, max_length=255)


@router.patch("/{user_id}/status", status_code=status.HTTP_200_OK, response_model=StatusChangeResponse)
async def change_user_status(
    user_id: UUID,
    request: ChangeStatusRequest,
    context: SessionContext = Depends(require_permission("users:update")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    notifier: Notifier = Depends(get_deferred_notifier),
    policy: SecurityPolicy = Depends(get_policy),
):
    """
    Change User Status

    Deactivating or suspending a user ends all of their sessions.
    """
    use_case = ChangeUserStatusUseCase(uow, credentials, notifier, policy)
    result = await run_with_timeout(
        use_case.execute(
            context.user.id, context.tenant.id, user_id, request.status, request.reason
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


class ChangeRoleRequest(BaseModel):
    role_name: str = Field(..., description="Target role name")
    reason: Optional[str] = Field(None, max_length=255)


@router.patch("/{user_id}/role", status_code=status.HTTP_200_OK, response_model=RoleChangeResponse)
async def change_user_role(
    user_id: UUID,
    request: ChangeRoleRequest,
    context: SessionContext = Depends(require_permission("roles:update")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Change User Role

    Raises:
        - 400 Bad Request: Unknown role or role unchanged
        - 403 Forbidden: Caller does not outrank the target or cannot assign the role
        - 404 Not Found: User not in caller's tenant
    """
    use_case = ChangeRoleUseCase(uow)
    result = await run_with_timeout(
        use_case.execute(
            context.user.id, context.tenant.id, user_id, request.role_name, request.reason
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/{user_id}/sessions/revoke",
    status_code=status.HTTP_200_OK,
    response_model=RevokeSessionsResponse,
)
async def revoke_user_sessions(
    user_id: UUID,
    context: SessionContext = Depends(require_permission("sessions:manage")),
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    policy: SecurityPolicy = Depends(get_policy),
):
    """Force sign-out of another user in the caller's tenant"""
    use_case = RevokeUserSessionsUseCase(uow, credentials, policy)
    result = await run_with_timeout(
        use_case.execute(context.user.id, context.tenant.id, user_id)
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value
