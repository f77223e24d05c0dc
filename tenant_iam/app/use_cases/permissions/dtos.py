"""
Permission DTOs
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class CheckPermissionCommand(BaseModel):
    permission_name: str
    resource_context: Optional[Dict[str, Any]] = None


class PermissionCheckData(BaseModel):
    permission_name: str
    granted: bool
    reason: Optional[str] = None


class CheckPermissionResponse(BaseModel):
    code: str
    message: str
    data: PermissionCheckData


class MyPermissionsData(BaseModel):
    role_name: Optional[str]
    permissions: List[str]


class MyPermissionsResponse(BaseModel):
    code: str
    message: str
    data: MyPermissionsData
