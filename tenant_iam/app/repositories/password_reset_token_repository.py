from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from tenant_iam.domain.entities import PasswordResetToken


class IPasswordResetTokenRepository(ABC):
    """Password reset token repository interface"""

    @abstractmethod
    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by SHA-256 hash"""
        pass

    @abstractmethod
    async def update(self, token: PasswordResetToken) -> PasswordResetToken:
        """Update existing token"""
        pass

    @abstractmethod
    async def invalidate_pending_by_user(self, user_id: UUID, reason: str) -> int:
        """Invalidate every pending token of a user. Returns count."""
        pass

    @abstractmethod
    async def count_admin_resets_since(self, user_id: UUID, since: datetime) -> int:
        """Count admin-initiated resets targeting a user since a point in time"""
        pass
