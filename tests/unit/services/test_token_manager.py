from datetime import timedelta
from uuid import uuid4

import pytest

from tenant_iam.app.services.token_manager import SUPERSEDED, TokenManager
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import (
    EmailVerification,
    EmailVerificationStatus,
    PasswordResetStatus,
    PasswordResetToken,
    ResetMethod,
    User,
    UserStatus,
)


@pytest.mark.asyncio
async def test_issue_reset_supersedes_pending(mock_uow, credentials, policy):
    user_id = uuid4()
    now = utcnow()

    token, row = await TokenManager(mock_uow, credentials, policy).issue_reset(user_id, now)

    mock_uow.password_reset_tokens.invalidate_pending_by_user.assert_awaited_once_with(
        user_id, SUPERSEDED
    )
    assert row.token_hash == credentials.sha256(token)
    assert row.expires_at == now + timedelta(hours=2)


@pytest.mark.asyncio
async def test_admin_reset_lasts_a_day(mock_uow, credentials, policy):
    now = utcnow()
    actor = uuid4()

    _, row = await TokenManager(mock_uow, credentials, policy).issue_reset(
        uuid4(), now, reset_method=ResetMethod.admin_reset_link, initiated_by=actor
    )

    assert row.expires_at == now + timedelta(hours=24)
    assert row.initiated_by == actor


@pytest.mark.parametrize(
    "status, expires_in, expected",
    [
        (PasswordResetStatus.used, timedelta(hours=1), "TOKEN_ALREADY_USED"),
        (PasswordResetStatus.invalidated, timedelta(hours=1), "INVALID_TOKEN"),
        (PasswordResetStatus.expired, timedelta(hours=1), "TOKEN_EXPIRED"),
        (PasswordResetStatus.pending, -timedelta(seconds=1), "TOKEN_EXPIRED"),
    ],
)
@pytest.mark.asyncio
async def test_validate_reset_rejections(mock_uow, credentials, policy, status, expires_in, expected):
    now = utcnow()
    mock_uow.password_reset_tokens.get_by_token_hash.return_value = PasswordResetToken(
        user_id=uuid4(),
        token_hash=credentials.sha256("tok"),
        status=status,
        expires_at=now + expires_in,
        created_at=now - timedelta(hours=1),
    )

    result = await TokenManager(mock_uow, credentials, policy).validate_reset("tok", now)

    assert result.error.code == expected


@pytest.mark.asyncio
async def test_verify_email_activates_pending_user(mock_uow, credentials, policy):
    now = utcnow()
    user = User(
        id=uuid4(),
        tenant_id=uuid4(),
        full_name="Sara Owner",
        email="owner@acme.com",
        password_hash="x",
        status=UserStatus.pending_verification,
    )
    verification = EmailVerification(
        user_id=user.id,
        token_hash=credentials.sha256("tok"),
        status=EmailVerificationStatus.pending,
        attempts=0,
        expires_at=now + timedelta(hours=1),
    )
    mock_uow.email_verifications.get_by_token_hash.return_value = verification
    mock_uow.users.get_by_id.return_value = user

    result = await TokenManager(mock_uow, credentials, policy).verify_email("tok", now)

    assert result.is_ok()
    assert user.status == UserStatus.active
    assert user.email_verified_at == now
    assert verification.status == EmailVerificationStatus.verified
    assert verification.attempts == 1


@pytest.mark.asyncio
async def test_resend_window(mock_uow, credentials, policy):
    manager = TokenManager(mock_uow, credentials, policy)

    mock_uow.email_verifications.count_created_since.return_value = 2
    assert await manager.can_resend_verification(uuid4(), utcnow()) is True

    mock_uow.email_verifications.count_created_since.return_value = 3
    assert await manager.can_resend_verification(uuid4(), utcnow()) is False
