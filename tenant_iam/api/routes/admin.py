"""
Platform administration endpoints, authenticated by the admin API key
rather than a user session.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from tenant_iam.api.error import raise_for_error
from tenant_iam.api.utils.admin_auth import verify_admin_api_key
from tenant_iam.api.utils.timeout import run_with_timeout
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.app.use_cases.admin import (
    ChangeTenantStatusUseCase,
    TenantStatusCommand,
    TenantStatusResponse,
)
from tenant_iam.depends import get_unit_of_work

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.post(
    "/tenants/{tenant_id}/status",
    status_code=status.HTTP_200_OK,
    response_model=TenantStatusResponse,
    dependencies=[Depends(verify_admin_api_key)],
)
async def change_tenant_status(
    tenant_id: UUID,
    request: TenantStatusCommand,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Suspend, deactivate or reactivate a tenant

    Raises:
        - 400 Bad Request: Unknown status
        - 401 Unauthorized: Missing or invalid admin API key
        - 404 Not Found: Tenant not found
    """
    use_case = ChangeTenantStatusUseCase(uow)
    result = await run_with_timeout(use_case.execute(tenant_id, request))

    if result.is_err():
        raise_for_error(result.error)

    return result.value
