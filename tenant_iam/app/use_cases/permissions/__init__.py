from .check_permission_use_case import CheckPermissionUseCase
from .get_my_permissions_use_case import GetMyPermissionsUseCase
from .dtos import (
    CheckPermissionCommand,
    CheckPermissionResponse,
    MyPermissionsResponse,
    PermissionCheckData,
)

__all__ = [
    "CheckPermissionUseCase",
    "GetMyPermissionsUseCase",
    "CheckPermissionCommand",
    "CheckPermissionResponse",
    "MyPermissionsResponse",
    "PermissionCheckData",
]
