from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from tenant_iam.domain.entities import SessionStatus, UserSession


class IUserSessionRepository(ABC):
    """UserSession repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, session_id: UUID) -> Optional[UserSession]:
        """Get session by ID"""
        pass

    @abstractmethod
    async def get_by_token_hash(self, token_hash: str) -> Optional[UserSession]:
        """Get session by SHA-256 hash of its bearer token"""
        pass

    @abstractmethod
    async def create(self, user_session: UserSession) -> UserSession:
        """Create a new session"""
        pass

    @abstractmethod
    async def update(self, user_session: UserSession) -> UserSession:
        """Update existing session"""
        pass

    @abstractmethod
    async def end_active_by_user(
        self,
        user_id: UUID,
        status: SessionStatus,
        now: datetime,
        except_session_id: Optional[UUID] = None,
    ) -> int:
        """
        Move every active session of a user to a terminal status.

        Returns count of sessions ended.
        """
        pass

    @abstractmethod
    async def end_active_by_tenant(
        self, tenant_id: UUID, status: SessionStatus, now: datetime
    ) -> int:
        """Move every active session of a tenant to a terminal status. Returns count."""
        pass

    @abstractmethod
    async def list_by_user(self, user_id: UUID, limit: int = 20) -> List[UserSession]:
        """Most recent sessions of a user, newest first"""
        pass
