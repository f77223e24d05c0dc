"""
Create User Use Case

Tenant administrators add accounts to their own tenant.
"""

import logging
from uuid import UUID

from tenant_iam.app.repositories.errors import DuplicateRecordError
from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.notifier import Notifier
from tenant_iam.app.services.permission_resolver import PermissionResolver
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.token_manager import TokenManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.app.use_cases.auth.validation import (
    first_error,
    normalize_email,
    validate_email_address,
    validate_full_name,
)
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import AuditEvent, RoleName, User, UserRole, UserStatus
from tenant_iam.domain.permission_catalog import ACCOUNT_ADMIN_ROLES, can_assign
from tenant_iam.libs.result import Error, Result, Return
from .dtos import CreateUserCommand, CreateUserResponse, UserSummary

logger = logging.getLogger(__name__)


class CreateUserUseCase:
    """
    Business Rules:
    - Only tenant owners and admins create users
    - The assigned role must be one the actor may hand out
    - Email unique across the platform (EMAIL_ALREADY_EXISTS)
    - Tenant max_users honored (MAX_USERS_REACHED)
    - New account: pending_verification, generated temporary password,
      password_reset_required, verification token
    - Welcome and verification emails sent after commit
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
        self, actor_user_id: UUID, tenant_id: UUID, command: CreateUserCommand
    ) -> Result[CreateUserResponse]:
        error = first_error(
            validate_full_name(command.full_name),
            validate_email_address(command.email),
        )
        if error:
            return Return.err(error)
        if command.role_name not in RoleName.__members__:
            return Return.err(Error("INVALID_ROLE", f"Unknown role: {command.role_name}"))

        role_name = RoleName[command.role_name]
        email = normalize_email(command.email)
        now = utcnow()
        resolver = PermissionResolver(self.uow)
        tokens = TokenManager(self.uow, self.credentials, self.policy)

        async with self.uow:
            actor_role = await resolver.get_role(actor_user_id, tenant_id, now)
            if actor_role is None or actor_role.name not in ACCOUNT_ADMIN_ROLES:
                return Return.err(
                    Error("INSUFFICIENT_ROLE_PRIVILEGES", "Only owners and admins can create users")
                )
            if not can_assign(actor_role.name, role_name):
                return Return.err(
                    Error(
                        "INSUFFICIENT_ROLE_PRIVILEGES",
                        f"{actor_role.name.value} cannot assign the {role_name.value} role",
                    )
                )

            tenant = await self.uow.tenants.get_by_id(tenant_id)
            if tenant is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            if await self.uow.users.get_by_email(email):
                return Return.err(Error("EMAIL_ALREADY_EXISTS", "Email already registered"))

            if await self.uow.users.count_by_tenant(tenant_id) >= tenant.max_users:
                return Return.err(
                    Error(
                        "MAX_USERS_REACHED",
                        "Tenant has reached its user limit",
                        {"max_users": tenant.max_users},
                    )
                )

            role = await self.uow.roles.get_by_name(role_name)
            if role is None:
                return Return.err(Error("ROLE_NOT_FOUND", f"Role {role_name.value} not seeded"))

            temporary_password = self.credentials.generate_temporary_password()
            try:
                user = await self.uow.users.create(
                    User(
                        tenant_id=tenant_id,
                        full_name=command.full_name.strip(),
                        email=email,
                        password_hash=self.credentials.hash_password(temporary_password),
                        status=UserStatus.pending_verification,
                        password_reset_required=True,
                        created_at=now,
                    )
                )
                await self.uow.user_roles.create(
                    UserRole(
                        user_id=user.id,
                        role_id=role.id,
                        tenant_id=tenant_id,
                        is_active=True,
                        assigned_by=actor_user_id,
                        assigned_reason="user_creation",
                        created_at=now,
                    )
                )
                token, _ = await tokens.issue_verification(user.id, now)
                await self.uow.audit_events.create(
                    AuditEvent(
                        tenant_id=tenant_id,
                        user_id=user.id,
                        actor_user_id=actor_user_id,
                        action="user_created",
                        event_metadata={"email": email, "role": role_name.value},
                        created_at=now,
                    )
                )
                await self.uow.commit()
            except DuplicateRecordError:
                return Return.err(Error("EMAIL_ALREADY_EXISTS", "Email already registered"))

        try:
            await self.notifier.send_welcome_email(user, temporary_password)
            await self.notifier.send_verification_email(user, token)
        except Exception:
            logger.exception(f"Welcome email failed for user {user.id}")

        return Return.ok(
            CreateUserResponse(
                code="USER_CREATED",
                message="User created",
                data=UserSummary(
                    user_id=str(user.id),
                    tenant_id=str(tenant_id),
                    email=user.email,
                    full_name=user.full_name,
                    status=user.status.value,
                    role_name=role_name.value,
                ),
            )
        )
