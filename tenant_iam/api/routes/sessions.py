from fastapi import APIRouter, Depends, status

from tenant_iam.api.error import raise_for_error
from tenant_iam.api.utils.timeout import run_with_timeout
from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import SessionContext
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.app.use_cases.users import (
    ListSessionsUseCase,
    RevokeOtherSessionsUseCase,
    RevokeSessionsResponse,
    SessionListResponse,
)
from tenant_iam.depends import (
    get_active_session,
    get_credentials,
    get_policy,
    get_unit_of_work,
    require_permission,
)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.get("", status_code=status.HTTP_200_OK, response_model=SessionListResponse)
async def list_sessions(
    context: SessionContext = Depends(require_permission("sessions:read")),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Caller's most recent sessions, the current one flagged"""
    use_case = ListSessionsUseCase(uow)
    result = await run_with_timeout(use_case.execute(context.user.id, context.session.id))

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.post(
    "/revoke-others", status_code=status.HTTP_200_OK, response_model=RevokeSessionsResponse
)
async def revoke_other_sessions(
    context: SessionContext = Depends(get_active_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
    credentials: CredentialEngine = Depends(get_credentials),
    policy: SecurityPolicy = Depends(get_policy),
):
    """End every session of the caller except the one making this request"""
    use_case = RevokeOtherSessionsUseCase(uow, credentials, policy)
    result = await run_with_timeout(use_case.execute(context.user.id, context.session.id))

    if result.is_err():
        raise_for_error(result.error)

    return result.value
