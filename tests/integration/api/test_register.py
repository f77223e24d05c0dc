import asyncio

import pytest
from httpx import AsyncClient
from sqlmodel import func, select

from config import ApplicationConfig
from tenant_iam.adapter.repositories.user_repository import UserRepository
from tenant_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tenant_iam.app.repositories.errors import RepositoryError
from tenant_iam.app.services.tenant_seeder import TenantSeeder
from tenant_iam.depends import get_tenant_seeder
from tenant_iam.domain.entities import (
    EmailVerification,
    EmailVerificationStatus,
    RolePermission,
    Tenant,
    User,
    UserRole,
    UserStatus,
)


@pytest.mark.asyncio
async def test_register_creates_tenant_owner_and_verification(register, db_session, notifier):
    """Successful Registration

    Given no account exists for the email
    When I register with valid details
    Then a tenant, an owner account, an owner role grant and a pending
    verification token exist together
    And the default role grants are seeded for the tenant
    And the verification email is sent after commit
    """
    response = await register()

    assert response.status_code == 201
    body = response.json()
    assert body["code"] == "REGISTRATION_SUCCESS"
    assert body["data"]["email"] == "owner@acme.com"
    assert body["data"]["redirect_url"] == "/login"

    user = (await db_session.exec(select(User).where(User.email == "owner@acme.com"))).one()
    assert user.status == UserStatus.pending_verification
    assert user.password_hash != "SecurePass123!"

    tenant = (await db_session.exec(select(Tenant).where(Tenant.id == user.tenant_id))).one()
    assert tenant.company_name == "Acme Corp"

    grants = (await db_session.exec(select(UserRole).where(UserRole.user_id == user.id))).all()
    assert len(grants) == 1
    assert grants[0].is_active

    verification = (
        await db_session.exec(select(EmailVerification).where(EmailVerification.user_id == user.id))
    ).one()
    assert verification.status == EmailVerificationStatus.pending
    assert verification.token_hash != notifier.verification_tokens["owner@acme.com"]

    seeded = (
        await db_session.exec(
            select(func.count(RolePermission.id)).where(RolePermission.tenant_id == tenant.id)
        )
    ).one()
    assert seeded > 0


@pytest.mark.asyncio
async def test_register_duplicate_email(register, db_session):
    """Duplicate Email

    Given an account exists for owner@acme.com
    When I register again with the same email in another case
    Then the request fails with 409 EMAIL_ALREADY_EXISTS
    And no second tenant is created
    """
    assert (await register()).status_code == 201

    response = await register(email="OWNER@acme.com", company_name="Other Corp")

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_ALREADY_EXISTS"

    tenants = (await db_session.exec(select(func.count(Tenant.id)))).one()
    assert tenants == 1


@pytest.mark.asyncio
async def test_register_weak_password(register, db_session):
    response = await register(password="weakpass")

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_PASSWORD"
    assert error["details"]["field"] == "password"

    users = (await db_session.exec(select(func.count(User.id)))).one()
    assert users == 0


@pytest.mark.asyncio
async def test_register_invalid_email(register):
    response = await register(email="not-an-email")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_register_unsupported_language(client: AsyncClient):
    response = await client.post(
        "/api/auth/register",
        json={
            "full_name": "Sara Owner",
            "email": "owner@acme.com",
            "password": "SecurePass123!",
            "company_name": "Acme Corp",
            "language": "klingon",
        },
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_register_missing_field(client: AsyncClient):
    response = await client.post("/api/auth/register", json={"email": "owner@acme.com"})

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_register_email_delayed_when_notifier_down(register, notifier):
    """Registration still succeeds when the mail channel is down"""
    notifier.available = False

    response = await register()

    assert response.status_code == 201
    assert response.json()["code"] == "REGISTRATION_SUCCESS_EMAIL_DELAYED"
    assert "owner@acme.com" not in notifier.verification_tokens


class ExplodingSeeder(TenantSeeder):
    """Reads the catalog in its own session, then fails before committing"""

    def __init__(self, uow):
        self.uow = uow

    async def seed_tenant(self, tenant_id, language):
        async with self.uow:
            await self.uow.roles.list_all()
            raise RuntimeError("seed store went away")


@pytest.mark.asyncio
async def test_register_survives_seeding_failure(app, register, session_factory, db_session):
    """Seeding Failure After Commit

    Given the per-tenant seeding step fails
    When I register
    Then registration still answers 201 with the new ids
    And the tenant and owner stay committed without role grants
    """

    async def exploding_seeder():
        async with session_factory() as session:
            yield ExplodingSeeder(SqlAlchemyUnitOfWork(session))

    app.dependency_overrides[get_tenant_seeder] = exploding_seeder

    response = await register()

    assert response.status_code == 201, response.text
    data = response.json()["data"]

    tenant = (await db_session.exec(select(Tenant))).one()
    assert str(tenant.id) == data["tenant_id"]

    grants = (
        await db_session.exec(
            select(func.count(RolePermission.id)).where(RolePermission.tenant_id == tenant.id)
        )
    ).one()
    assert grants == 0


@pytest.mark.asyncio
async def test_register_not_held_up_by_slow_notifier(register, notifier, db_session, monkeypatch):
    """Slow Mail Channel

    Given the store timeout is shorter than the mail delivery time
    When I register
    Then registration answers 201 instead of timing out
    And the verification email is still delivered afterwards
    And a retry is rejected as a duplicate rather than creating a second tenant
    """
    monkeypatch.setattr(ApplicationConfig, "STORE_TIMEOUT_SECONDS", 1.0)
    deliver = notifier.send_verification_email

    async def slow_send(user, token):
        await asyncio.sleep(1.5)
        await deliver(user, token)

    notifier.send_verification_email = slow_send

    response = await register()

    assert response.status_code == 201, response.text
    assert response.json()["code"] == "REGISTRATION_SUCCESS"
    assert "owner@acme.com" in notifier.verification_tokens

    retry = await register()
    assert retry.status_code == 409

    tenants = (await db_session.exec(select(func.count(Tenant.id)))).one()
    assert tenants == 1


@pytest.mark.asyncio
async def test_register_rolls_back_when_user_insert_fails(register, db_session, monkeypatch):
    """Atomic Registration

    Given the owner insert fails after the tenant row was written
    When I register
    Then the request fails with 500 TENANT_CREATION_FAILED
    And neither a tenant nor a user is left behind
    """

    async def failing_create(self, user):
        raise RepositoryError("user insert failed")

    monkeypatch.setattr(UserRepository, "create", failing_create)

    response = await register()

    assert response.status_code == 500
    assert response.json()["error"]["code"] == "TENANT_CREATION_FAILED"

    tenants = (await db_session.exec(select(func.count(Tenant.id)))).one()
    users = (await db_session.exec(select(func.count(User.id)))).one()
    assert tenants == 0
    assert users == 0
