"""
Lockout & Rate Limiter

Two independent brakes on credential guessing:
- per account: consecutive wrong passwords lock the account
- per source address: distinct accounts failed from one address within
  a rolling window block that address
"""

import logging
import math
from datetime import datetime
from typing import Optional
from uuid import UUID

from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.entities import AttemptType, LoginAttempt, LoginAttemptStatus, User
from tenant_iam.libs.result import Error

logger = logging.getLogger(__name__)

LOCK_REASON = "Too many failed login attempts"


class LoginThrottle:
    def __init__(self, uow: UnitOfWork, policy: SecurityPolicy):
        self.uow = uow
        self.policy = policy

    async def check_address(self, ip_address: str, now: datetime) -> Optional[Error]:
        since = now - self.policy.rate_limit_window
        failed_accounts = await self.uow.login_attempts.count_failed_accounts_by_ip(
            ip_address, since
        )
        if failed_accounts < self.policy.max_failed_attempts_per_ip:
            return None

        first_failure = await self.uow.login_attempts.first_failure_by_ip(ip_address, since)
        window_end = (first_failure or now) + self.policy.rate_limit_window
        retry_after = max(1, math.ceil((window_end - now).total_seconds()))

        logger.warning(f"Rate limit reached for address {ip_address}")
        return Error(
            "RATE_LIMIT_EXCEEDED",
            "Too many failed login attempts from this address",
            {"retry_after_seconds": retry_after},
        )

    def check_lock(self, user: User, now: datetime) -> Optional[Error]:
        """
        ACCOUNT_LOCKED while the lock is running. An expired lock is
        cleared in place so the attempt proceeds with a fresh counter.
        """
        if user.locked_until is None:
            return None

        if user.locked_until > now:
            remaining = (user.locked_until - now).total_seconds()
            return Error(
                "ACCOUNT_LOCKED",
                "Account is temporarily locked",
                {"retry_after_minutes": max(1, math.ceil(remaining / 60))},
            )

        self.clear(user)
        return None

    def register_failure(self, user: User, now: datetime) -> bool:
        """Count a wrong password. Returns True when this failure locks the account"""
        user.login_attempts += 1
        if user.login_attempts >= self.policy.max_login_attempts:
            user.locked_until = now + self.policy.lockout_duration
            user.lock_reason = LOCK_REASON
            logger.warning(f"Account {user.id} locked after {user.login_attempts} failures")
            return True
        return False

    @staticmethod
    def clear(user: User) -> None:
        user.login_attempts = 0
        user.locked_until = None
        user.lock_reason = None

    async def record(
        self,
        email: str,
        ip_address: str,
        status: LoginAttemptStatus,
        user_agent: Optional[str] = None,
        user_id: Optional[UUID] = None,
        tenant_id: Optional[UUID] = None,
        failure_reason: Optional[str] = None,
        session_id: Optional[UUID] = None,
        attempt_type: AttemptType = AttemptType.login,
    ) -> LoginAttempt:
        attempt = LoginAttempt(
            user_id=user_id,
            email=email,
            ip_address=ip_address,
            user_agent=user_agent,
            attempt_type=attempt_type,
            status=status,
            failure_reason=failure_reason,
            tenant_context=tenant_id,
            session_id=session_id,
        )
        return await self.uow.login_attempts.create(attempt)
