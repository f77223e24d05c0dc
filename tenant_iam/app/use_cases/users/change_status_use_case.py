"""
Change User Status Use Case
"""

import logging
from typing import Optional
from uuid import UUID

from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.notifier import Notifier
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.session_manager import DEACTIVATED_USER_STATUSES, SessionManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import AuditEvent, UserStatus
from tenant_iam.domain.permission_catalog import outranks
from tenant_iam.libs.result import Error, Result, Return
from .access import resolve_actor_and_target
from .dtos import StatusChangeData, StatusChangeResponse

logger = logging.getLogger(__name__)

SETTABLE_STATUSES = (UserStatus.active, UserStatus.inactive, UserStatus.suspended)


class ChangeUserStatusUseCase:
    """
    Business Rules:
    - Users cannot change their own status
    - The actor must outrank the target
    - Moving to inactive/suspended invalidates every session of the target
    - Status-change notification after commit
    """

    def __init__(
        self,
        uow: UnitOfWork,
        credentials: CredentialEngine,
        notifier: Notifier,
        policy: SecurityPolicy,
    ):
        self.uow = uow
        self.credentials = credentials
        self.notifier = notifier
        self.policy = policy

    async def execute(
        self,
        actor_user_id: UUID,
        tenant_id: UUID,
        target_user_id: UUID,
        new_status: str,
        reason: Optional[str] = None,
    ) -> Result[StatusChangeResponse]:
        if new_status not in {s.value for s in SETTABLE_STATUSES}:
            return Return.err(
                Error("INVALID_STATUS", "Status must be one of active, inactive, suspended")
            )
        if actor_user_id == target_user_id:
            return Return.err(
                Error("INSUFFICIENT_ROLE_PRIVILEGES", "Users cannot change their own status")
            )

        status = UserStatus(new_status)
        now = utcnow()
        sessions = SessionManager(self.uow, self.credentials, self.policy)

        async with self.uow:
            resolved = await resolve_actor_and_target(
                self.uow, actor_user_id, tenant_id, target_user_id, now
            )
            if resolved.is_err():
                return resolved
            access = resolved.value
            user = access.target

            if access.target_role is not None and not outranks(
                access.actor_role, access.target_role
            ):
                return Return.err(
                    Error(
                        "INSUFFICIENT_ROLE_PRIVILEGES",
                        "Cannot change the status of an equal or higher role",
                    )
                )

            old_status = user.status
            if old_status == status:
                return Return.err(Error("INVALID_STATUS", f"User is already {status.value}"))

            user.status = status
            await self.uow.users.update(user)

            invalidated = 0
            if status in DEACTIVATED_USER_STATUSES:
                invalidated = await sessions.invalidate_all(user.id, now)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=user.id,
                    actor_user_id=actor_user_id,
                    action="user_status_changed",
                    event_metadata={
                        "old_status": old_status.value,
                        "new_status": status.value,
                        "reason": reason,
                        "sessions_invalidated": invalidated,
                    },
                    created_at=now,
                )
            )
            await self.uow.commit()

        try:
            await self.notifier.send_status_change_email(user, status.value, reason)
        except Exception:
            logger.exception(f"Status change email failed for user {user.id}")

        return Return.ok(
            StatusChangeResponse(
                code="USER_STATUS_UPDATED",
                message="User status updated",
                data=StatusChangeData(
                    user_id=str(user.id),
                    old_status=old_status.value,
                    new_status=status.value,
                    sessions_invalidated=invalidated,
                ),
            )
        )
