"""
Register Use Case

Self-service signup: one new tenant with its owner account.
"""

import logging
from uuid import UUID

from tenant_iam.app.repositories.errors import (
    DuplicateRecordError,
    RepositoryError,
    StoreUnavailableError,
)
from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.notifier import Notifier
from tenant_iam.app.services.security_policy import SecurityPolicy
from tenant_iam.app.services.tenant_seeder import TenantSeeder
from tenant_iam.app.services.token_manager import TokenManager
from tenant_iam.app.services.unit_of_work import UnitOfWork
from tenant_iam.domain.base import utcnow
from tenant_iam.domain.entities import (
    AuditEvent,
    Language,
    Locale,
    Role,
    RoleName,
    Tenant,
    TenantStatus,
    User,
    UserRole,
    UserStatus,
)
from tenant_iam.domain.permission_catalog import ROLE_DESCRIPTIONS
from tenant_iam.libs.result import Error, Result, Return
from .dtos import RegisterCommand, RegisterResponse, RegistrationData
from .validation import (
    first_error,
    normalize_email,
    validate_company_name,
    validate_email_address,
    validate_full_name,
    validate_language,
    validate_locale,
    validate_password,
)

logger = logging.getLogger(__name__)


class RegisterUseCase:
    """
    Register Use Case

    Command/Response Pattern:
    - Input: RegisterCommand
    - Output: Result[RegisterResponse]

    Business Logic:
    1. Validate input before touching the store
    2. Reject an email already registered anywhere on the platform
    3. In one transaction: Tenant(active, max_users=10),
       User(pending_verification), UserRole(tenant_owner),
       EmailVerification(pending, +24h), AuditEvent
    4. After commit, best-effort: seed tenant grants, send verification email
    5. REGISTRATION_SUCCESS when the email was handed to the notifier,
       REGISTRATION_SUCCESS_EMAIL_DELAYED otherwise
    """

    def __init__(
        self,
        uow: UnitOfWork,
        credentials: CredentialEngine,
        notifier: Notifier,
        seeder: TenantSeeder,
        policy: SecurityPolicy,
    ):
        self.uow = uow
        self.credentials = credentials
        self.notifier = notifier
        self.seeder = seeder
        self.policy = policy

    async def execute(self, command: RegisterCommand) -> Result[RegisterResponse]:
        error = first_error(
            validate_full_name(command.full_name),
            validate_email_address(command.email),
            validate_password(command.password),
            validate_company_name(command.company_name),
            validate_language(command.language),
            validate_locale(command.locale),
        )
        if error:
            return Return.err(error)

        email = normalize_email(command.email)
        now = utcnow()
        tokens = TokenManager(self.uow, self.credentials, self.policy)

        async with self.uow:
            if await self.uow.users.get_by_email(email):
                return Return.err(Error("EMAIL_ALREADY_EXISTS", "Email already registered"))

            try:
                owner_role = await self._owner_role()

                tenant = await self.uow.tenants.create(
                    Tenant(
                        company_name=command.company_name.strip(),
                        language=Language[command.language],
                        locale=Locale[command.locale],
                        status=TenantStatus.active,
                        created_at=now,
                    )
                )

                user = await self.uow.users.create(
                    User(
                        tenant_id=tenant.id,
                        full_name=command.full_name.strip(),
                        email=email,
                        password_hash=self.credentials.hash_password(command.password),
                        status=UserStatus.pending_verification,
                        password_changed_at=now,
                        created_at=now,
                    )
                )

                await self.uow.user_roles.create(
                    UserRole(
                        user_id=user.id,
                        role_id=owner_role.id,
                        tenant_id=tenant.id,
                        is_active=True,
                        assigned_reason="registration",
                        created_at=now,
                    )
                )

                token, verification = await tokens.issue_verification(
                    user.id, now, command.ip_address, command.user_agent
                )

                await self.uow.audit_events.create(
                    AuditEvent(
                        tenant_id=tenant.id,
                        user_id=user.id,
                        actor_user_id=user.id,
                        action="user_registered",
                        event_metadata={
                            "email": email,
                            "company_name": tenant.company_name,
                        },
                        created_at=now,
                    )
                )

                await self.uow.commit()
                tenant_id, user_id = tenant.id, user.id
            except DuplicateRecordError:
                return Return.err(Error("EMAIL_ALREADY_EXISTS", "Email already registered"))
            except StoreUnavailableError:
                raise
            except RepositoryError as exc:
                logger.error(f"Registration transaction failed: {exc.message}")
                return Return.err(
                    Error("TENANT_CREATION_FAILED", "Could not create tenant account")
                )

        await self._seed_tenant(tenant_id, command.language)
        email_sent = await self._send_verification(user, token)

        logger.info(f"Registered tenant {tenant_id} with owner {user_id}")

        if email_sent:
            code, message = "REGISTRATION_SUCCESS", "Registration successful, check your email"
        else:
            code, message = (
                "REGISTRATION_SUCCESS_EMAIL_DELAYED",
                "Registration successful, the verification email will arrive shortly",
            )

        return Return.ok(
            RegisterResponse(
                code=code,
                message=message,
                data=RegistrationData(
                    user_id=str(user_id),
                    tenant_id=str(tenant_id),
                    email=email,
                ),
            )
        )

    async def _owner_role(self) -> Role:
        role = await self.uow.roles.get_by_name(RoleName.tenant_owner)
        if role is None:
            role = await self.uow.roles.create(
                Role(
                    name=RoleName.tenant_owner,
                    description=ROLE_DESCRIPTIONS[RoleName.tenant_owner],
                    is_system_role=True,
                )
            )
        return role

    async def _seed_tenant(self, tenant_id: UUID, language: str) -> None:
        try:
            await self.seeder.seed_tenant(tenant_id, language)
        except Exception:
            logger.exception(f"Seeding failed for tenant {tenant_id}")

    async def _send_verification(self, user: User, token: str) -> bool:
        if not self.notifier.is_available():
            logger.warning(f"Notifier unavailable, verification email delayed for {user.id}")
            return False
        try:
            await self.notifier.send_verification_email(user, token)
        except Exception:
            logger.exception(f"Verification email failed for user {user.id}")
            return False
        return True
