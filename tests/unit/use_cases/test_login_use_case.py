from datetime import timedelta
from uuid import uuid4

import pytest

from tenant_iam.app.repositories.errors import DuplicateRecordError
from tenant_iam.app.use_cases.auth import LoginCommand, LoginUseCase
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import (
    LoginAttemptStatus,
    Role,
    RoleName,
    Tenant,
    TenantStatus,
    User,
    UserRole,
    UserStatus,
)

PASSWORD = "SecurePass123!"


@pytest.fixture
def tenant():
    return Tenant(id=uuid4(), company_name="Acme Corp", status=TenantStatus.active)


@pytest.fixture
def user(credentials, tenant):
    return User(
        id=uuid4(),
        tenant_id=tenant.id,
        full_name="Sara Owner",
        email="user@acme.com",
        password_hash=credentials.hash_password(PASSWORD),
        status=UserStatus.active,
    )


@pytest.fixture
def use_case(mock_uow, credentials, policy, user, tenant):
    mock_uow.users.get_by_email.return_value = user
    mock_uow.tenants.get_by_id.return_value = tenant
    return LoginUseCase(mock_uow, credentials, policy)


def _command(password=PASSWORD, **overrides):
    return LoginCommand(email="User@Acme.com", password=password, ip_address="10.0.0.1", **overrides)


def _recorded_status(mock_uow):
    return mock_uow.login_attempts.create.call_args.args[0].status


@pytest.mark.asyncio
async def test_successful_login(use_case, mock_uow, user, tenant):
    """Full session with role, permissions and role redirect"""
    # Arrange
    role = Role(id=uuid4(), name=RoleName.manager)
    mock_uow.user_roles.get_active.return_value = UserRole(
        user_id=user.id, role_id=role.id, tenant_id=tenant.id
    )
    mock_uow.roles.get_by_id.return_value = role
    mock_uow.permissions.get_granted_names.return_value = ["users:read"]
    user.login_attempts = 3

    # Act
    result = await use_case.execute(_command())

    # Assert
    assert result.is_ok()
    response = result.value
    assert response.code == "LOGIN_SUCCESS"
    assert response.data.role_name == "manager"
    assert response.data.permissions == ["users:read"]
    assert response.data.redirect_url == "/dashboard/manager"
    assert len(response.data.session_token) == 64
    assert user.login_attempts == 0
    assert user.last_login_ip == "10.0.0.1"
    assert _recorded_status(mock_uow) == LoginAttemptStatus.success
    mock_uow.sessions.end_active_by_user.assert_awaited_once()
    mock_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_login_without_role(use_case):
    # Act
    result = await use_case.execute(_command())

    # Assert
    assert result.value.data.role_name is None
    assert result.value.data.permissions == []
    assert result.value.data.redirect_url == "/dashboard"


@pytest.mark.asyncio
async def test_login_wrong_password_counts_failure(use_case, mock_uow, user):
    # Act
    result = await use_case.execute(_command(password="WrongPass123!"))

    # Assert
    assert result.error.code == "INVALID_CREDENTIALS"
    assert user.login_attempts == 1
    assert _recorded_status(mock_uow) == LoginAttemptStatus.failed_invalid_credentials
    mock_uow.sessions.create.assert_not_called()


@pytest.mark.asyncio
async def test_login_tenth_failure_locks(use_case, user):
    # Arrange
    user.login_attempts = 9

    # Act
    result = await use_case.execute(_command(password="WrongPass123!"))

    # Assert
    assert result.error.code == "INVALID_CREDENTIALS"
    assert user.locked_until is not None


@pytest.mark.asyncio
async def test_login_unknown_email(use_case, mock_uow):
    # Arrange
    mock_uow.users.get_by_email.return_value = None

    # Act
    result = await use_case.execute(_command())

    # Assert
    assert result.error.code == "INVALID_CREDENTIALS"
    assert _recorded_status(mock_uow) == LoginAttemptStatus.failed_user_not_found


@pytest.mark.asyncio
async def test_login_locked_account_rejects_correct_password(use_case, mock_uow, user):
    # Arrange
    user.login_attempts = 10
    user.locked_until = utcnow() + timedelta(minutes=45)

    # Act
    result = await use_case.execute(_command())

    # Assert
    assert result.error.code == "ACCOUNT_LOCKED"
    assert result.error.details["retry_after_minutes"] == 45
    assert _recorded_status(mock_uow) == LoginAttemptStatus.failed_account_locked


@pytest.mark.asyncio
async def test_login_rate_limited(use_case, mock_uow):
    # Arrange
    mock_uow.login_attempts.count_failed_accounts_by_ip.return_value = 5

    # Act
    result = await use_case.execute(_command())

    # Assert
    assert result.error.code == "RATE_LIMIT_EXCEEDED"
    assert "retry_after_seconds" in result.error.details
    mock_uow.users.get_by_email.assert_not_called()


@pytest.mark.asyncio
async def test_login_suspended_user(use_case, user):
    # Arrange
    user.status = UserStatus.suspended

    # Act
    result = await use_case.execute(_command())

    # Assert
    assert result.error.code == "ACCOUNT_DEACTIVATED"


@pytest.mark.parametrize(
    "status, code",
    [(TenantStatus.suspended, "TENANT_SUSPENDED"), (TenantStatus.inactive, "TENANT_INACTIVE")],
)
@pytest.mark.asyncio
async def test_login_tenant_not_active(use_case, tenant, status, code):
    # Arrange
    tenant.status = status

    # Act
    result = await use_case.execute(_command())

    # Assert
    assert result.error.code == code


@pytest.mark.asyncio
async def test_login_password_reset_required(use_case, mock_uow, user):
    """Temporary password gives a restricted one-hour session"""
    # Arrange
    user.password_reset_required = True

    # Act
    result = await use_case.execute(_command(remember_me=True))

    # Assert
    response = result.value
    assert response.code == "PASSWORD_RESET_REQUIRED"
    assert response.data.permissions == []
    assert response.data.redirect_url == "/auth/change-password"
    assert response.data.remember_me_enabled is False
    mock_uow.permissions.get_granted_names.assert_not_called()


@pytest.mark.asyncio
async def test_login_concurrent_collision(use_case, mock_uow):
    # Arrange
    mock_uow.sessions.create.side_effect = DuplicateRecordError("uq_user_session_active")

    # Act
    result = await use_case.execute(_command())

    # Assert
    assert result.error.code == "SERVICE_UNAVAILABLE"
    mock_uow.commit.assert_not_called()
