from uuid import uuid4

import pytest

from tenant_iam.app.use_cases.users import (
    AdminResetPasswordUseCase,
    ChangeRoleUseCase,
    ChangeUserStatusUseCase,
    CreateUserCommand,
    CreateUserUseCase,
    RevokeUserSessionsUseCase,
)
from tenant_iam.domain.entities import (
    PasswordResetStatus,
    ResetMethod,
    RoleName,
    Tenant,
    User,
    UserRole,
    UserStatus,
)

ACTOR = uuid4()
TARGET = uuid4()
TENANT = uuid4()


@pytest.fixture
def target(mock_uow):
    user = User(
        id=TARGET,
        tenant_id=TENANT,
        full_name="Mina Member",
        email="member@acme.com",
        password_hash="x",
        status=UserStatus.active,
    )
    mock_uow.users.get_by_id.return_value = user
    return user


# ============================================================================
# Create user
# ============================================================================


@pytest.fixture
def create_use_case(mock_uow, credentials, notifier, policy, assign_roles):
    mock_uow.tenants.get_by_id.return_value = Tenant(id=TENANT, company_name="Acme", max_users=10)
    assign_roles(TENANT, {ACTOR: RoleName.admin})
    return CreateUserUseCase(mock_uow, credentials, notifier, policy)


def _create_command(role_name="employee"):
    return CreateUserCommand(full_name="Mina Member", email="Member@Acme.com", role_name=role_name)


@pytest.mark.asyncio
async def test_create_user(create_use_case, mock_uow, credentials, notifier):
    # Act
    result = await create_use_case.execute(ACTOR, TENANT, _create_command())

    # Assert
    assert result.value.code == "USER_CREATED"
    assert result.value.data.role_name == "employee"
    assert "temporary_password" not in result.value.data.model_dump()

    user = mock_uow.users.create.call_args.args[0]
    assert user.email == "member@acme.com"
    assert user.password_reset_required is True
    assert user.status == UserStatus.pending_verification

    temporary_password = notifier.send_welcome_email.call_args.args[1]
    assert credentials.verify_password(temporary_password, user.password_hash)
    notifier.send_verification_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_create_user_role_above_actor(create_use_case, mock_uow):
    result = await create_use_case.execute(ACTOR, TENANT, _create_command("admin"))

    assert result.error.code == "INSUFFICIENT_ROLE_PRIVILEGES"
    mock_uow.users.create.assert_not_called()


@pytest.mark.asyncio
async def test_create_user_by_manager(create_use_case, assign_roles):
    assign_roles(TENANT, {ACTOR: RoleName.manager})

    result = await create_use_case.execute(ACTOR, TENANT, _create_command("staff"))

    assert result.error.code == "INSUFFICIENT_ROLE_PRIVILEGES"


@pytest.mark.asyncio
async def test_create_user_limit_reached(create_use_case, mock_uow):
    mock_uow.users.count_by_tenant.return_value = 10

    result = await create_use_case.execute(ACTOR, TENANT, _create_command())

    assert result.error.code == "MAX_USERS_REACHED"
    assert result.error.details == {"max_users": 10}


@pytest.mark.asyncio
async def test_create_user_unknown_role(create_use_case):
    result = await create_use_case.execute(ACTOR, TENANT, _create_command("auditor"))

    assert result.error.code == "INVALID_ROLE"


# ============================================================================
# Change role
# ============================================================================


@pytest.mark.asyncio
async def test_change_role_creates_grant(mock_uow, assign_roles, target):
    # Arrange
    assign_roles(TENANT, {ACTOR: RoleName.admin, TARGET: RoleName.staff})

    # Act
    result = await ChangeRoleUseCase(mock_uow).execute(ACTOR, TENANT, TARGET, "manager", "promotion")

    # Assert
    assert result.value.code == "USER_ROLE_UPDATED"
    assert result.value.data.old_role == "staff"
    assert result.value.data.new_role == "manager"
    mock_uow.user_roles.deactivate_active.assert_awaited_once()
    created = mock_uow.user_roles.create.call_args.args[0]
    assert created.assigned_by == ACTOR
    assert created.assigned_reason == "promotion"


@pytest.mark.asyncio
async def test_change_role_reactivates_existing_grant(mock_uow, assign_roles, target):
    # Arrange
    assign_roles(TENANT, {ACTOR: RoleName.tenant_owner, TARGET: RoleName.staff})
    old_grant = UserRole(user_id=TARGET, role_id=uuid4(), tenant_id=TENANT, is_active=False)
    mock_uow.user_roles.get_grant.return_value = old_grant

    # Act
    result = await ChangeRoleUseCase(mock_uow).execute(ACTOR, TENANT, TARGET, "employee")

    # Assert
    assert result.is_ok()
    assert old_grant.is_active is True
    mock_uow.user_roles.create.assert_not_called()
    mock_uow.user_roles.update.assert_awaited_once_with(old_grant)


@pytest.mark.asyncio
async def test_change_role_of_peer_denied(mock_uow, assign_roles, target):
    assign_roles(TENANT, {ACTOR: RoleName.admin, TARGET: RoleName.admin})

    result = await ChangeRoleUseCase(mock_uow).execute(ACTOR, TENANT, TARGET, "staff")

    assert result.error.code == "INSUFFICIENT_ROLE_PRIVILEGES"


@pytest.mark.asyncio
async def test_change_own_role_denied(mock_uow):
    result = await ChangeRoleUseCase(mock_uow).execute(ACTOR, TENANT, ACTOR, "staff")

    assert result.error.code == "INSUFFICIENT_ROLE_PRIVILEGES"


@pytest.mark.asyncio
async def test_change_role_same_role(mock_uow, assign_roles, target):
    assign_roles(TENANT, {ACTOR: RoleName.admin, TARGET: RoleName.staff})

    result = await ChangeRoleUseCase(mock_uow).execute(ACTOR, TENANT, TARGET, "staff")

    assert result.error.code == "INVALID_ROLE"


@pytest.mark.asyncio
async def test_change_role_other_tenant_user(mock_uow, assign_roles, target):
    assign_roles(TENANT, {ACTOR: RoleName.admin})
    target.tenant_id = uuid4()

    result = await ChangeRoleUseCase(mock_uow).execute(ACTOR, TENANT, TARGET, "staff")

    assert result.error.code == "USER_NOT_FOUND"


# ============================================================================
# Change status
# ============================================================================


@pytest.mark.asyncio
async def test_suspend_user_ends_sessions(mock_uow, credentials, notifier, policy, assign_roles, target):
    # Arrange
    assign_roles(TENANT, {ACTOR: RoleName.admin, TARGET: RoleName.employee})
    mock_uow.sessions.end_active_by_user.return_value = 1
    use_case = ChangeUserStatusUseCase(mock_uow, credentials, notifier, policy)

    # Act
    result = await use_case.execute(ACTOR, TENANT, TARGET, "suspended", "policy breach")

    # Assert
    assert result.value.code == "USER_STATUS_UPDATED"
    assert result.value.data.sessions_invalidated == 1
    assert target.status == UserStatus.suspended
    notifier.send_status_change_email.assert_awaited_once_with(target, "suspended", "policy breach")


@pytest.mark.asyncio
async def test_reactivate_user_keeps_sessions(mock_uow, credentials, notifier, policy, assign_roles, target):
    assign_roles(TENANT, {ACTOR: RoleName.admin, TARGET: RoleName.employee})
    target.status = UserStatus.inactive

    result = await ChangeUserStatusUseCase(mock_uow, credentials, notifier, policy).execute(
        ACTOR, TENANT, TARGET, "active"
    )

    assert result.value.data.new_status == "active"
    mock_uow.sessions.end_active_by_user.assert_not_called()


@pytest.mark.asyncio
async def test_status_unchanged(mock_uow, credentials, notifier, policy, assign_roles, target):
    assign_roles(TENANT, {ACTOR: RoleName.admin, TARGET: RoleName.employee})

    result = await ChangeUserStatusUseCase(mock_uow, credentials, notifier, policy).execute(
        ACTOR, TENANT, TARGET, "active"
    )

    assert result.error.code == "INVALID_STATUS"


@pytest.mark.asyncio
async def test_status_pending_not_settable(mock_uow, credentials, notifier, policy):
    result = await ChangeUserStatusUseCase(mock_uow, credentials, notifier, policy).execute(
        ACTOR, TENANT, TARGET, "pending_verification"
    )

    assert result.error.code == "INVALID_STATUS"


# ============================================================================
# Admin password reset
# ============================================================================


@pytest.fixture
def reset_use_case(mock_uow, credentials, notifier, policy, assign_roles, target):
    assign_roles(TENANT, {ACTOR: RoleName.admin, TARGET: RoleName.employee})
    return AdminResetPasswordUseCase(mock_uow, credentials, notifier, policy)


@pytest.mark.asyncio
async def test_admin_reset_link(reset_use_case, mock_uow, notifier):
    # Act
    result = await reset_use_case.execute(ACTOR, TENANT, TARGET, "admin_reset_link")

    # Assert
    assert result.value.code == "PASSWORD_RESET_BY_ADMIN"
    assert result.value.data.expires_at is not None
    token = mock_uow.password_reset_tokens.create.call_args.args[0]
    assert token.reset_method == ResetMethod.admin_reset_link
    assert token.initiated_by == ACTOR
    assert token.status == PasswordResetStatus.pending
    notifier.send_password_reset_email.assert_awaited_once()


@pytest.mark.asyncio
async def test_admin_temporary_password(reset_use_case, mock_uow, credentials, notifier, target):
    # Act
    result = await reset_use_case.execute(ACTOR, TENANT, TARGET, "admin_temporary_password")

    # Assert
    assert result.value.data.expires_at is None
    assert target.password_reset_required is True
    temporary_password = notifier.send_welcome_email.call_args.args[1]
    assert credentials.verify_password(temporary_password, target.password_hash)
    token = mock_uow.password_reset_tokens.create.call_args.args[0]
    assert token.status == PasswordResetStatus.used


@pytest.mark.asyncio
async def test_admin_reset_daily_limit(reset_use_case, mock_uow):
    mock_uow.password_reset_tokens.count_admin_resets_since.return_value = 3

    result = await reset_use_case.execute(ACTOR, TENANT, TARGET, "admin_reset_link")

    assert result.error.code == "RATE_LIMIT_EXCEEDED"
    assert result.error.details["retry_after_seconds"] == 86400


@pytest.mark.asyncio
async def test_admin_reset_by_manager_denied(reset_use_case, assign_roles):
    assign_roles(TENANT, {ACTOR: RoleName.manager, TARGET: RoleName.staff})

    result = await reset_use_case.execute(ACTOR, TENANT, TARGET, "admin_reset_link")

    assert result.error.code == "INSUFFICIENT_ROLE_PRIVILEGES"


@pytest.mark.asyncio
async def test_admin_reset_deactivated_user(reset_use_case, target):
    target.status = UserStatus.inactive

    result = await reset_use_case.execute(ACTOR, TENANT, TARGET, "admin_reset_link")

    assert result.error.code == "INVALID_STATUS"


@pytest.mark.asyncio
async def test_admin_reset_self(reset_use_case):
    result = await reset_use_case.execute(ACTOR, TENANT, ACTOR, "admin_reset_link")

    assert result.error.code == "VALIDATION_ERROR"


# ============================================================================
# Revoke another user's sessions
# ============================================================================


@pytest.mark.asyncio
async def test_revoke_user_sessions(mock_uow, credentials, policy, assign_roles, target):
    assign_roles(TENANT, {ACTOR: RoleName.admin, TARGET: RoleName.manager})
    mock_uow.sessions.end_active_by_user.return_value = 1

    result = await RevokeUserSessionsUseCase(mock_uow, credentials, policy).execute(
        ACTOR, TENANT, TARGET
    )

    assert result.value.data.revoked_count == 1
    assert mock_uow.audit_events.create.call_args.args[0].action == "sessions_revoked"
