"""
Tenant IAM Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    AttemptType,
    CheckResult,
    EmailVerificationStatus,
    Language,
    Locale,
    LoginAttemptStatus,
    LoginMethod,
    PasswordResetStatus,
    PermissionAction,
    ResetMethod,
    RoleName,
    SessionStatus,
    TenantStatus,
    UserStatus,
)

# Export all entities
from .tenant import Tenant
from .user import User
from .role import Role
from .user_role import UserRole
from .permission import Permission
from .role_permission import RolePermission
from .user_session import UserSession
from .password_reset_token import PasswordResetToken
from .email_verification import EmailVerification
from .login_attempt import LoginAttempt
from .permission_check import PermissionCheck
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "AttemptType",
    "CheckResult",
    "EmailVerificationStatus",
    "Language",
    "Locale",
    "LoginAttemptStatus",
    "LoginMethod",
    "PasswordResetStatus",
    "PermissionAction",
    "ResetMethod",
    "RoleName",
    "SessionStatus",
    "TenantStatus",
    "UserStatus",
    # Entities
    "Tenant",
    "User",
    "Role",
    "UserRole",
    "Permission",
    "RolePermission",
    "UserSession",
    "PasswordResetToken",
    "EmailVerification",
    "LoginAttempt",
    "PermissionCheck",
    "AuditEvent",
]
