"""
Logout Use Case

Ends the session behind a bearer token. Idempotent: an unknown, expired
or already-ended token still reports success.
"""

from typing import Optional

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import SessionManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.libs.result import Result, Return
from .dtos import MessageResponse


class LogoutUseCase:
    def __init__(
        self, uow: UnitOfWork, credentials: CredentialEngine, policy: SecurityPolicy
    ):
        self.uow = uow
        self.credentials = credentials
        self.policy = policy

    async def execute(self, session_token: Optional[str]) -> Result[MessageResponse]:
        if session_token:
            sessions = SessionManager(self.uow, self.credentials, self.policy)
            async with self.uow:
                if await sessions.logout(session_token, utcnow()):
                    await self.uow.commit()

        return Return.ok(MessageResponse(code="LOGOUT_SUCCESS", message="Logged out"))
