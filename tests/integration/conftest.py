from datetime import datetime
from typing import Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from tenant_iam.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from tenant_iam.api.app import create_app
from tenant_iam.app.services.catalog_seeder import seed_catalog
from tenant_iam.app.services.credentials import CredentialEngine
from tenant_iam.app.services.notifier import Notifier
from tenant_iam.app.services.tenant_seeder import DefaultTenantSeeder
from tenant_iam.depends import (
    get_credentials,
    get_notifier,
    get_tenant_seeder,
    get_unit_of_work,
)
from tenant_iam.domain.entities import User

PASSWORD = "SecurePass123!"
NEW_PASSWORD = "BrandNewPass456$"


class RecordingNotifier(Notifier):
    """Keeps the last token/password per email so tests can follow links"""

    def __init__(self):
        self.available = True
        self.verification_tokens: Dict[str, str] = {}
        self.reset_tokens: Dict[str, str] = {}
        self.welcome_passwords: Dict[str, Optional[str]] = {}
        self.status_changes: List[Tuple[str, str]] = []

    def is_available(self) -> bool:
        return self.available

    async def send_verification_email(self, user: User, token: str) -> None:
        self.verification_tokens[user.email] = token

    async def send_password_reset_email(
        self, user: User, token: str, expires_at: datetime
    ) -> None:
        self.reset_tokens[user.email] = token

    async def send_welcome_email(
        self, user: User, temporary_password: Optional[str] = None
    ) -> None:
        self.welcome_passwords[user.email] = temporary_password

    async def send_status_change_email(
        self, user: User, new_status: str, reason: Optional[str] = None
    ) -> None:
        self.status_changes.append((user.email, new_status))


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        await seed_catalog(SqlAlchemyUnitOfWork(session))
        yield session


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def app(db_session, session_factory, notifier):
    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    async def override_get_tenant_seeder():
        async with session_factory() as session:
            yield DefaultTenantSeeder(SqlAlchemyUnitOfWork(session))

    credentials = CredentialEngine(rounds=4)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_credentials] = lambda: credentials
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_tenant_seeder] = override_get_tenant_seeder
    return app


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    async def _register(
        email: str = "owner@acme.com",
        password: str = PASSWORD,
        company_name: str = "Acme Corp",
    ):
        return await client.post(
            "/api/auth/register",
            json={
                "full_name": "Sara Owner",
                "email": email,
                "password": password,
                "company_name": company_name,
                "language": "persian",
                "locale": "iran",
            },
        )

    return _register


@pytest.fixture
def login(client):
    async def _login(email: str, password: str = PASSWORD, remember_me: bool = False):
        return await client.post(
            "/api/auth/login",
            json={"email": email, "password": password, "remember_me": remember_me},
        )

    return _login


@pytest_asyncio.fixture
async def owner(register, login):
    """Registered tenant owner with a full session"""
    response = await register()
    assert response.status_code == 201
    registration = response.json()["data"]

    response = await login("owner@acme.com")
    assert response.status_code == 200
    data = response.json()["data"]
    return {
        "user_id": registration["user_id"],
        "tenant_id": registration["tenant_id"],
        "email": "owner@acme.com",
        "token": data["session_token"],
        "headers": bearer(data["session_token"]),
    }


@pytest.fixture
def add_member(client, login, notifier, owner):
    """Creates a user in the owner's tenant and walks them through the
    forced password change so they end up with a full session."""

    async def _add_member(email: str, role_name: str, created_by: Optional[dict] = None):
        creator = created_by or owner
        response = await client.post(
            "/api/users",
            json={"full_name": "Team Member", "email": email, "role_name": role_name},
            headers=creator["headers"],
        )
        assert response.status_code == 201, response.text
        user_id = response.json()["data"]["user_id"]

        temporary_password = notifier.welcome_passwords[email]
        response = await login(email, temporary_password)
        assert response.json()["code"] == "PASSWORD_RESET_REQUIRED"
        restricted = bearer(response.json()["data"]["session_token"])

        response = await client.post(
            "/api/auth/change-password",
            json={"current_password": temporary_password, "new_password": PASSWORD},
            headers=restricted,
        )
        assert response.status_code == 200, response.text

        response = await login(email)
        assert response.status_code == 200, response.text
        token = response.json()["data"]["session_token"]
        return {"user_id": user_id, "email": email, "token": token, "headers": bearer(token)}

    return _add_member
