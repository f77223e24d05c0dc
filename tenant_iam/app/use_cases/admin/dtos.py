"""
Platform Administration DTOs
"""

from typing import Optional

from pydantic import BaseModel


class TenantStatusCommand(BaseModel):
    status: str
    reason: Optional[str] = None


class TenantStatusData(BaseModel):
    tenant_id: str
    old_status: str
    new_status: str
    sessions_invalidated: int


class TenantStatusResponse(BaseModel):
    code: str
    message: str
    data: TenantStatusData
