"""
Notifier adapters.

LoggingNotifier writes delivery intents to the application log until a
mail transport is wired in. Token values and passwords never reach the
log; only the fact that a message would be sent.
"""

import logging
from datetime import datetime
from typing import Awaitable, Callable, Optional

from fastapi import BackgroundTasks

from tenant_iam.app.services.notifier import Notifier
from tenant_iam.domain.entities import User

logger = logging.getLogger(__name__)


class LoggingNotifier(Notifier):
    def __init__(self, available: bool = True):
        self.available = available

    def is_available(self) -> bool:
        return self.available

    async def send_verification_email(self, user: User, token: str) -> None:
        logger.info(f"Verification email queued for user {user.id}")

    async def send_password_reset_email(
        self, user: User, token: str, expires_at: datetime
    ) -> None:
        logger.info(
            f"Password reset email queued for user {user.id}, "
            f"link valid until {expires_at.isoformat()}"
        )

    async def send_welcome_email(
        self, user: User, temporary_password: Optional[str] = None
    ) -> None:
        with_password = " with temporary password" if temporary_password else ""
        logger.info(f"Welcome email{with_password} queued for user {user.id}")

    async def send_status_change_email(
        self, user: User, new_status: str, reason: Optional[str] = None
    ) -> None:
        logger.info(f"Status change email ({new_status}) queued for user {user.id}")


class BackgroundNotifier(Notifier):
    """
    Hands every message to FastAPI background tasks so delivery runs after
    the response is sent, outside the request's store timeout. Delivery
    failures are logged and dropped.
    """

    def __init__(self, notifier: Notifier, background_tasks: BackgroundTasks):
        self.notifier = notifier
        self.background_tasks = background_tasks

    def is_available(self) -> bool:
        return self.notifier.is_available()

    async def send_verification_email(self, user: User, token: str) -> None:
        self._defer("verification email", self.notifier.send_verification_email, user, token)

    async def send_password_reset_email(
        self, user: User, token: str, expires_at: datetime
    ) -> None:
        self._defer(
            "password reset email",
            self.notifier.send_password_reset_email,
            user,
            token,
            expires_at,
        )

    async def send_welcome_email(
        self, user: User, temporary_password: Optional[str] = None
    ) -> None:
        self._defer("welcome email", self.notifier.send_welcome_email, user, temporary_password)

    async def send_status_change_email(
        self, user: User, new_status: str, reason: Optional[str] = None
    ) -> None:
        self._defer(
            "status change email",
            self.notifier.send_status_change_email,
            user,
            new_status,
            reason,
        )

    def _defer(
        self, kind: str, send: Callable[..., Awaitable[None]], user: User, *args
    ) -> None:
        user_id = user.id

        async def deliver():
            try:
                await send(user, *args)
            except Exception:
                logger.exception(f"Delivery of {kind} failed for user {user_id}")

        self.background_tasks.add_task(deliver)
