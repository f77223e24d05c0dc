from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from tenant_iam.domain.entities import LoginAttempt


class ILoginAttemptRepository(ABC):
    """Login attempt repository interface (append-only)"""

    @abstractmethod
    async def create(self, attempt: LoginAttempt) -> LoginAttempt:
        """Append a login attempt"""
        pass

    @abstractmethod
    async def count_failed_accounts_by_ip(self, ip_address: str, since: datetime) -> int:
        """
        Count distinct emails with failed credential attempts from an
        address since a point in time.
        """
        pass

    @abstractmethod
    async def first_failure_by_ip(
        self, ip_address: str, since: datetime
    ) -> Optional[datetime]:
        """Timestamp of the oldest failed credential attempt in the window"""
        pass
