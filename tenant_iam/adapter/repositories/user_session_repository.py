from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.user_session_repository import IUserSessionRepository
from tenant_iam.domain.entities import SessionStatus, UserSession


class UserSessionRepository(SqlModelRepository, IUserSessionRepository):
    """UserSession repository implementation using SQLModel"""

    async def get_by_id(self, session_id: UUID) -> Optional[UserSession]:
        with translate_store_errors("session lookup"):
            stmt = select(UserSession).where(UserSession.id == session_id)
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def get_by_token_hash(self, token_hash: str) -> Optional[UserSession]:
        with translate_store_errors("session lookup"):
            stmt = select(UserSession).where(UserSession.token_hash == token_hash)
            result = await self.session.exec(stmt)
            return result.one_or_none()

    async def create(self, user_session: UserSession) -> UserSession:
        return await self._save(user_session, "session insert")

    async def update(self, user_session: UserSession) -> UserSession:
        return await self._save(user_session, "session update")

    async def end_active_by_user(
        self,
        user_id: UUID,
        status: SessionStatus,
        now: datetime,
        except_session_id: Optional[UUID] = None,
    ) -> int:
        conditions = [
            UserSession.user_id == user_id,
            UserSession.status == SessionStatus.active,
        ]
        if except_session_id is not None:
            conditions.append(UserSession.id != except_session_id)

        with translate_store_errors("session invalidation"):
            stmt = update(UserSession).where(*conditions).values(status=status, ended_at=now)
            result = await self.session.execute(stmt)
            await self.session.flush()
            return result.rowcount

    async def end_active_by_tenant(
        self, tenant_id: UUID, status: SessionStatus, now: datetime
    ) -> int:
        with translate_store_errors("session invalidation"):
            stmt = (
                update(UserSession)
                .where(
                    UserSession.tenant_id == tenant_id,
                    UserSession.status == SessionStatus.active,
                )
                .values(status=status, ended_at=now)
            )
            result = await self.session.execute(stmt)
            await self.session.flush()
            return result.rowcount

    async def list_by_user(self, user_id: UUID, limit: int = 20) -> List[UserSession]:
        with translate_store_errors("session listing"):
            stmt = (
                select(UserSession)
                .where(UserSession.user_id == user_id)
                .order_by(UserSession.created_at.desc())
                .limit(limit)
            )
            result = await self.session.exec(stmt)
            return list(result.all())
