from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from tenant_iam.domain.entities import User


class Notifier(ABC):
    """
    Outbound user notifications.

    Always invoked after the owning transaction has committed. Callers
    treat every failure as best-effort: logged, never surfaced.
    """

    @abstractmethod
    def is_available(self) -> bool:
        """False when the delivery channel is known to be down"""
        pass

    @abstractmethod
    async def send_verification_email(self, user: User, token: str) -> None:
        pass

    @abstractmethod
    async def send_password_reset_email(
        self, user: User, token: str, expires_at: datetime
    ) -> None:
        pass

    @abstractmethod
    async def send_welcome_email(
        self, user: User, temporary_password: Optional[str] = None
    ) -> None:
        pass

    @abstractmethod
    async def send_status_change_email(
        self, user: User, new_status: str, reason: Optional[str] = None
    ) -> None:
        pass
