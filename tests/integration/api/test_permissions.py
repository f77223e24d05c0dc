import pytest
from httpx import AsyncClient
from sqlmodel import select

from tenant_iam.domain.entities import CheckResult, PermissionCheck
from tenant_iam.domain.permission_catalog import ROLE_PERMISSION_MATRIX
from tenant_iam.domain.entities import RoleName


async def _check(client: AsyncClient, headers, name: str, context=None):
    return await client.post(
        "/api/permissions/check",
        json={"permission_name": name, "resource_context": context},
        headers=headers,
    )


@pytest.mark.asyncio
async def test_owner_permission_granted(owner, client: AsyncClient, db_session):
    """Permission check

    Given a tenant owner
    When they check users:create
    Then it is granted
    And the decision is recorded with its resource context
    """
    response = await _check(client, owner["headers"], "users:create", {"screen": "team"})

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == "PERMISSION_GRANTED"
    assert body["data"]["granted"] is True

    checks = (
        await db_session.exec(
            select(PermissionCheck).where(PermissionCheck.permission_name == "users:create")
        )
    ).all()
    assert len(checks) == 1
    assert checks[0].check_result == CheckResult.granted
    assert checks[0].resource_context == {"screen": "team"}


@pytest.mark.asyncio
async def test_staff_permission_denied(owner, add_member, client: AsyncClient, db_session):
    staff = await add_member("staff@acme.com", "staff")

    response = await _check(client, staff["headers"], "users:delete")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["granted"] is False
    assert data["reason"] == "permission_not_granted"

    check = (
        await db_session.exec(
            select(PermissionCheck).where(PermissionCheck.permission_name == "users:delete")
        )
    ).one()
    assert check.check_result == CheckResult.denied
    assert check.denial_reason == "permission_not_granted"


@pytest.mark.asyncio
async def test_unknown_permission_denied(owner, client: AsyncClient):
    response = await _check(client, owner["headers"], "spaceships:launch")

    assert response.json()["data"] == {
        "permission_name": "spaceships:launch",
        "granted": False,
        "reason": "unknown_permission",
    }


@pytest.mark.asyncio
async def test_malformed_permission_name(owner, client: AsyncClient):
    response = await _check(client, owner["headers"], "users")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_my_permissions(owner, add_member, client: AsyncClient):
    manager = await add_member("lead@acme.com", "manager")

    response = await client.get("/api/permissions/me", headers=manager["headers"])

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["role_name"] == "manager"
    assert data["permissions"] == sorted(ROLE_PERMISSION_MATRIX[RoleName.manager])


@pytest.mark.asyncio
async def test_route_guard_denies_missing_permission(owner, add_member, client: AsyncClient):
    staff = await add_member("staff@acme.com", "staff")

    response = await client.post(
        "/api/users",
        json={"full_name": "Someone", "email": "someone@acme.com", "role_name": "staff"},
        headers=staff["headers"],
    )

    assert response.status_code == 403
    error = response.json()["error"]
    assert error["code"] == "PERMISSION_DENIED"
    assert error["details"]["permission"] == "users:create"
