"""
Validate Session Use Case

Resolves a bearer token to its session, user and tenant for request
guards. An expired row is flipped to ``expired`` and committed even
though the call fails.
"""

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import SessionContext, SessionManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.libs.result import Result


class ValidateSessionUseCase:
    def __init__(
        self, uow: UnitOfWork, credentials: CredentialEngine, policy: SecurityPolicy
    ):
        self.uow = uow
        self.credentials = credentials
        self.policy = policy

    async def execute(self, session_token: str) -> Result[SessionContext]:
        sessions = SessionManager(self.uow, self.credentials, self.policy)
        async with self.uow:
            result = await sessions.validate(session_token, utcnow())
            await self.uow.commit()
        return result
