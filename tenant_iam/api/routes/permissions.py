from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, Field

from tenant_iam.api.error import raise_for_error
from tenant_iam.api.utils.request_info import client_ip, user_agent
from tenant_iam.api.utils.timeout import run_with_timeout
from tenant_iam.app.services.session_manager import SessionContext
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.app.use_cases.permissions import (
    CheckPermissionCommand,
    CheckPermissionResponse,
    CheckPermissionUseCase,
    GetMyPermissionsUseCase,
    MyPermissionsResponse,
)
from tenant_iam.depends import get_active_session, get_unit_of_work

router = APIRouter(prefix="/permissions", tags=["Permissions"])


class CheckPermissionRequest(BaseModel):
    permission_name: str = Field(..., description="resource:action, e.g. users:create")
    resource_context: Optional[Dict[str, Any]] = Field(
        None, description="Opaque context stored with the check record"
    )


@router.post("/check", status_code=status.HTTP_200_OK, response_model=CheckPermissionResponse)
async def check_permission(
    request: CheckPermissionRequest,
    http_request: Request,
    context: SessionContext = Depends(get_active_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Check Permission

    A denial is answered with 200 and granted=false; the caller decides
    what to do with it.
    """
    use_case = CheckPermissionUseCase(uow)
    result = await run_with_timeout(
        use_case.execute(
            context.user.id,
            context.tenant.id,
            CheckPermissionCommand(**request.model_dump()),
            ip_address=client_ip(http_request),
            user_agent=user_agent(http_request),
        )
    )

    if result.is_err():
        raise_for_error(result.error)

    return result.value


@router.get("/me", status_code=status.HTTP_200_OK, response_model=MyPermissionsResponse)
async def my_permissions(
    context: SessionContext = Depends(get_active_session),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    use_case = GetMyPermissionsUseCase(uow)
    result = await run_with_timeout(use_case.execute(context.user.id, context.tenant.id))

    if result.is_err():
        raise_for_error(result.error)

    return result.value
