import logging
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from fastapi import BackgroundTasks

from tenant_iam.adapter.services.notifier import BackgroundNotifier
from tenant_iam.domain.entities import User, UserStatus


def _user():
    return User(
        id=uuid4(),
        tenant_id=uuid4(),
        full_name="Sara Owner",
        email="owner@acme.com",
        password_hash="x",
        status=UserStatus.active,
    )


def _inner():
    inner = MagicMock()
    inner.is_available.return_value = True
    inner.send_verification_email = AsyncMock()
    inner.send_status_change_email = AsyncMock()
    return inner


@pytest.mark.asyncio
async def test_send_is_deferred_until_background_tasks_run():
    # Arrange
    inner = _inner()
    tasks = BackgroundTasks()
    notifier = BackgroundNotifier(inner, tasks)
    user = _user()

    # Act
    await notifier.send_verification_email(user, "token")

    # Assert
    inner.send_verification_email.assert_not_called()
    await tasks()
    inner.send_verification_email.assert_awaited_once_with(user, "token")


@pytest.mark.asyncio
async def test_delivery_failure_is_logged_not_raised(caplog):
    inner = _inner()
    inner.send_status_change_email.side_effect = ConnectionError("smtp down")
    tasks = BackgroundTasks()
    notifier = BackgroundNotifier(inner, tasks)

    await notifier.send_status_change_email(_user(), "suspended", "policy")

    with caplog.at_level(logging.ERROR):
        await tasks()

    assert "Delivery of status change email failed" in caplog.text


def test_availability_follows_wrapped_notifier():
    inner = _inner()
    inner.is_available.return_value = False

    assert BackgroundNotifier(inner, BackgroundTasks()).is_available() is False
