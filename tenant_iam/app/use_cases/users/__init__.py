from .admin_reset_password_use_case import AdminResetPasswordUseCase
from .change_role_use_case import ChangeRoleUseCase
from .change_status_use_case import ChangeUserStatusUseCase
from .create_user_use_case import CreateUserUseCase
from .dtos import (
    AdminResetPasswordResponse,
    CreateUserCommand,
    CreateUserResponse,
    RevokeSessionsResponse,
    RoleChangeResponse,
    SessionListResponse,
    StatusChangeResponse,
)
from .sessions_use_case import (
    ListSessionsUseCase,
    RevokeOtherSessionsUseCase,
    RevokeUserSessionsUseCase,
)

__all__ = [
    "AdminResetPasswordUseCase",
    "ChangeRoleUseCase",
    "ChangeUserStatusUseCase",
    "CreateUserUseCase",
    "ListSessionsUseCase",
    "RevokeOtherSessionsUseCase",
    "RevokeUserSessionsUseCase",
    "AdminResetPasswordResponse",
    "CreateUserCommand",
    "CreateUserResponse",
    "RevokeSessionsResponse",
    "RoleChangeResponse",
    "SessionListResponse",
    "StatusChangeResponse",
]
