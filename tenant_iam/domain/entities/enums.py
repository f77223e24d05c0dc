"""
Tenant IAM Domain Enums

All enumeration types used across domain entities.
Member names equal their values so partial indexes can filter on them.
"""

from enum import Enum


class TenantStatus(str, Enum):
    """Tenant status"""

    active = "active"
    inactive = "inactive"
    suspended = "suspended"


class UserStatus(str, Enum):
    """User account status"""

    pending_verification = "pending_verification"
    active = "active"
    inactive = "inactive"
    suspended = "suspended"


class RoleName(str, Enum):
    """Fixed set of system roles"""

    tenant_owner = "tenant_owner"
    admin = "admin"
    manager = "manager"
    employee = "employee"
    staff = "staff"


class PermissionAction(str, Enum):
    """Actions a permission can grant on a resource"""

    create = "create"
    read = "read"
    update = "update"
    delete = "delete"
    manage = "manage"
    export = "export"
    import_ = "import"


class SessionStatus(str, Enum):
    """UserSession lifecycle: active is the only non-terminal state"""

    active = "active"
    expired = "expired"
    invalidated = "invalidated"
    logged_out = "logged_out"


class LoginMethod(str, Enum):
    """How a session was obtained"""

    email_password = "email_password"
    password_reset = "password_reset"  # restricted, password change only


class PasswordResetStatus(str, Enum):
    """PasswordResetToken lifecycle"""

    pending = "pending"
    used = "used"
    expired = "expired"
    invalidated = "invalidated"


class ResetMethod(str, Enum):
    """Who started a password reset and how it is delivered"""

    self_service = "self_service"
    admin_reset_link = "admin_reset_link"
    admin_temporary_password = "admin_temporary_password"


class EmailVerificationStatus(str, Enum):
    """EmailVerification lifecycle"""

    pending = "pending"
    verified = "verified"
    expired = "expired"


class AttemptType(str, Enum):
    """Kind of authentication attempt recorded in LoginAttempt"""

    login = "login"
    password_reset = "password_reset"


class LoginAttemptStatus(str, Enum):
    """Outcome of an authentication attempt"""

    success = "success"
    failed_invalid_credentials = "failed_invalid_credentials"
    failed_account_locked = "failed_account_locked"
    failed_rate_limited = "failed_rate_limited"
    failed_user_not_found = "failed_user_not_found"
    failed_account_deactivated = "failed_account_deactivated"
    failed_tenant_inactive = "failed_tenant_inactive"


class CheckResult(str, Enum):
    """Outcome of a permission check"""

    granted = "granted"
    denied = "denied"


class Language(str, Enum):
    """Supported UI languages"""

    persian = "persian"
    arabic = "arabic"


class Locale(str, Enum):
    """Supported regional locales"""

    iran = "iran"
    uae = "uae"
