"""
Platform operator authentication.

Tenant status changes are not made by tenant users; they come from the
operator console with a shared key in ``X-Admin-API-Key``.
"""

import hmac
from typing import Optional

from fastapi import Security, status
from fastapi.security import APIKeyHeader

from config import ApplicationConfig
from tenant_iam.api.error import ClientError
from tenant_iam.libs.result import Error

admin_key_header = APIKeyHeader(name="X-Admin-API-Key", auto_error=False)


async def verify_admin_api_key(api_key: Optional[str] = Security(admin_key_header)) -> None:
    """
    Raises:
        ClientError: 401 UNAUTHORIZED without a key, 401 INVALID_API_KEY
        when it does not match ADMIN_API_KEY
    """
    if not api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    expected = ApplicationConfig.ADMIN_API_KEY or ""
    if not expected or not hmac.compare_digest(api_key.encode(), expected.encode()):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
