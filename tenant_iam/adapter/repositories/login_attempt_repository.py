from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlmodel import select

from tenant_iam.adapter.repositories.base import SqlModelRepository, translate_store_errors
from tenant_iam.app.repositories.login_attempt_repository import ILoginAttemptRepository
from tenant_iam.domain.entities import AttemptType, LoginAttempt, LoginAttemptStatus

# Failures that count against a source address
CREDENTIAL_FAILURES = (
    LoginAttemptStatus.failed_invalid_credentials,
    LoginAttemptStatus.failed_user_not_found,
)


class LoginAttemptRepository(SqlModelRepository, ILoginAttemptRepository):
    """SQLModel implementation of the login attempt log"""

    async def create(self, attempt: LoginAttempt) -> LoginAttempt:
        return await self._save(attempt, "login attempt insert")

    def _failures_from(self, ip_address: str, since: datetime) -> list:
        return [
            LoginAttempt.ip_address == ip_address,
            LoginAttempt.attempt_type == AttemptType.login,
            LoginAttempt.status.in_(CREDENTIAL_FAILURES),
            LoginAttempt.created_at >= since,
        ]

    async def count_failed_accounts_by_ip(self, ip_address: str, since: datetime) -> int:
        """Distinct emails, not attempts: retrying one account never trips the address limit"""
        with translate_store_errors("login attempt count"):
            stmt = select(func.count(func.distinct(LoginAttempt.email))).where(
                *self._failures_from(ip_address, since)
            )
            result = await self.session.exec(stmt)
            return result.one()

    async def first_failure_by_ip(
        self, ip_address: str, since: datetime
    ) -> Optional[datetime]:
        with translate_store_errors("login attempt lookup"):
            stmt = select(func.min(LoginAttempt.created_at)).where(
                *self._failures_from(ip_address, since)
            )
            result = await self.session.exec(stmt)
            return result.one()
