import pytest
from httpx import AsyncClient

NEW_PASSWORD = "BrandNewPass456$"


async def _change(client: AsyncClient, headers, current: str, new: str = NEW_PASSWORD):
    return await client.post(
        "/api/auth/change-password",
        json={"current_password": current, "new_password": new},
        headers=headers,
    )


@pytest.mark.asyncio
async def test_change_password_keeps_current_session(owner, client: AsyncClient, login):
    response = await _change(client, owner["headers"], "SecurePass123!")

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == "PASSWORD_CHANGE_SUCCESS"
    assert body["data"]["redirect_url"] == "/dashboard/owner"

    assert (await client.get("/api/permissions/me", headers=owner["headers"])).status_code == 200
    assert (await login("owner@acme.com", NEW_PASSWORD)).status_code == 200


@pytest.mark.asyncio
async def test_change_password_wrong_current(owner, client: AsyncClient):
    response = await _change(client, owner["headers"], "NotMyPass123!")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "CURRENT_PASSWORD_INCORRECT"


@pytest.mark.asyncio
async def test_change_password_must_differ(owner, client: AsyncClient):
    response = await _change(client, owner["headers"], "SecurePass123!", "SecurePass123!")

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_restricted_session_only_changes_password(owner, client: AsyncClient, login, notifier):
    """Restricted session

    Given an account created by an admin with a temporary password
    When the user logs in with it
    Then they get a restricted session with role "temporary" and no permissions
    And every route except change-password answers PASSWORD_CHANGE_REQUIRED
    And changing the password ends the restricted session
    """
    response = await client.post(
        "/api/users",
        json={"full_name": "New Hire", "email": "hire@acme.com", "role_name": "staff"},
        headers=owner["headers"],
    )
    assert response.status_code == 201
    temporary_password = notifier.welcome_passwords["hire@acme.com"]

    response = await login("hire@acme.com", temporary_password)

    assert response.status_code == 200
    body = response.json()
    assert body["code"] == "PASSWORD_RESET_REQUIRED"
    assert body["data"]["role_name"] == "temporary"
    assert body["data"]["permissions"] == []
    assert body["data"]["redirect_url"] == "/auth/change-password"
    restricted = {"Authorization": f"Bearer {body['data']['session_token']}"}

    response = await client.get("/api/permissions/me", headers=restricted)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "PASSWORD_CHANGE_REQUIRED"

    response = await _change(client, restricted, temporary_password)
    assert response.status_code == 200
    assert response.json()["data"]["redirect_url"] == "/login"

    assert (await client.get("/api/permissions/me", headers=restricted)).status_code == 401

    response = await login("hire@acme.com", NEW_PASSWORD)
    assert response.json()["code"] == "LOGIN_SUCCESS"
    assert response.json()["data"]["redirect_url"] == "/dashboard/staff"
