from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional
from uuid import UUID

from tenant_iam.domain.entities import EmailVerification


class IEmailVerificationRepository(ABC):
    """Email verification repository interface"""

    @abstractmethod
    async def create(self, verification: EmailVerification) -> EmailVerification:
        """Create a new verification token"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[EmailVerification]:
        """Get verification by SHA-256 hash of its token"""
        pass

    @abstractmethod
    async def update(self, verification: EmailVerification) -> EmailVerification:
        """Update existing verification"""
        pass

    @abstractmethod
    async def expire_pending_by_user(self, user_id: UUID) -> int:
        """Mark every pending verification of a user expired. Returns count."""
        pass

    @abstractmethod
    async def count_created_since(self, user_id: UUID, since: datetime) -> int:
        """Count verifications issued to a user since a point in time"""
        pass
