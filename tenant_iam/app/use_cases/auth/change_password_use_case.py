"""
Change Password Use Case

Replaces the signed-in user's password. The only action a restricted
(password_reset) session may perform.
"""

import logging
from uuid import UUID

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.login_throttle import LoginThrottle
from tenant_iam.app.services.permission_resolver import PermissionResolver
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import SessionManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import AuditEvent
from tenant_iam.domain.permission_catalog import redirect_for_role
from tenant_iam.libs.result import Error, Result, Return
from .dtos import ChangePasswordData, ChangePasswordResponse
from .validation import validate_password

logger = logging.getLogger(__name__)


class ChangePasswordUseCase:
    """
    Business Rules:
    - Current password must match (CURRENT_PASSWORD_INCORRECT)
    - New password must satisfy the policy and differ from the current one
    - Clears password_reset_required
    - Every other active session is invalidated; a restricted session
      is ended too and the user signs in again
    """

    def __init__(
        self, uow: UnitOfWork, credentials: CredentialEngine, policy: SecurityPolicy
    ):
        self.uow = uow
        self.credentials = credentials
        self.policy = policy

    async def execute(
        self,
        user_id: UUID,
        session_id: UUID,
        restricted: bool,
        current_password: str,
        new_password: str,
    ) -> Result[ChangePasswordResponse]:
        error = validate_password(new_password)
        if error:
            return Return.err(error)
        if new_password == current_password:
            return Return.err(
                Error(
                    "VALIDATION_ERROR",
                    "New password must differ from the current password",
                    {"field": "new_password"},
                )
            )

        now = utcnow()
        sessions = SessionManager(self.uow, self.credentials, self.policy)
        resolver = PermissionResolver(self.uow)

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if not self.credentials.verify_password(current_password, user.password_hash):
                return Return.err(
                    Error("CURRENT_PASSWORD_INCORRECT", "Current password is incorrect")
                )

            user.password_hash = self.credentials.hash_password(new_password)
            user.password_changed_at = now
            user.password_reset_required = False
            LoginThrottle.clear(user)
            await self.uow.users.update(user)

            if restricted:
                invalidated = await sessions.invalidate_all(user.id, now)
                redirect_url = "/login"
            else:
                invalidated = await sessions.invalidate_all(
                    user.id, now, except_session_id=session_id
                )
                role = await resolver.get_role(user.id, user.tenant_id, now)
                redirect_url = redirect_for_role(role.name.value if role else None)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=user.tenant_id,
                    user_id=user.id,
                    actor_user_id=user.id,
                    action="password_changed",
                    event_metadata={
                        "restricted_session": restricted,
                        "sessions_invalidated": invalidated,
                    },
                    created_at=now,
                )
            )
            await self.uow.commit()

        logger.info(f"Password changed for user {user.id}")
        return Return.ok(
            ChangePasswordResponse(
                code="PASSWORD_CHANGE_SUCCESS",
                message="Password changed successfully",
                data=ChangePasswordData(
                    sessions_invalidated=invalidated, redirect_url=redirect_url
                ),
            )
        )
