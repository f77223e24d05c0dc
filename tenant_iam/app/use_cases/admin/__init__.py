from .change_tenant_status_use_case import ChangeTenantStatusUseCase
from .dtos import TenantStatusCommand, TenantStatusResponse

__all__ = ["ChangeTenantStatusUseCase", "TenantStatusCommand", "TenantStatusResponse"]
