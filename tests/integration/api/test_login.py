import pytest
from httpx import AsyncClient

from src.api.utils.jwt import decode_user_claims


@pytest.mark.asyncio
async def test_login_granted_after_platform_admin_role(client: AsyncClient, admin):
    """Login is forbidden until the user holds an admin role

    Given a platform user whose only role grants no admin authority
    When they log in with the right password
    Then the request fails with 403 INSUFFICIENT_AUTHORITY
    When super_admin is granted at tenant 0
    Then login succeeds and the access token carries platform admin with scope ALL
    """
    user = await admin.register("root")
    viewer_role = await admin.create_role("viewer", data_scope="UNIT_ONLY")
    await admin.assign(user["id"], role_ids=[viewer_role["id"]])

    response = await admin.login("root")
    assert response.status_code == 403
    assert response.json()["error"] == {
        "code": "INSUFFICIENT_AUTHORITY",
        "message": "insufficient authority",
    }

    super_role = await admin.create_role("super_admin", data_scope="UNIT_ONLY")
    await admin.assign(user["id"], role_ids=[super_role["id"]])

    response = await admin.login("root")
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["refresh_token"]

    claims = decode_user_claims(data["access_token"])
    assert claims.user_id == user["id"]
    assert claims.is_platform_admin is True
    assert claims.data_scope.value == "ALL"
    assert claims.roles == ["super_admin"]


@pytest.mark.asyncio
async def test_login_tenant_admin(client: AsyncClient, admin):
    tenant = await admin.create_tenant("Acme Corp", "acme")
    root_unit = await admin.create_org_unit("Acme", tenant_id=tenant["id"])
    sales = await admin.create_org_unit("Sales", tenant_id=tenant["id"], parent_id=root_unit["id"])
    user = await admin.register("alice", tenant_code="acme")
    assert user["tenant_id"] == tenant["id"]

    role = await admin.create_role(
        "tenant_admin", tenant_id=tenant["id"], data_scope="UNIT_AND_CHILD"
    )
    await admin.assign(
        user["id"],
        tenant_id=tenant["id"],
        role_ids=[role["id"]],
        org_unit_ids=[root_unit["id"], sales["id"]],
    )

    response = await admin.login("alice")

    assert response.status_code == 200
    claims = decode_user_claims(response.json()["access_token"])
    assert claims.tenant_id == tenant["id"]
    assert claims.is_tenant_admin is True
    assert claims.is_platform_admin is False
    assert claims.data_scope.value == "UNIT_AND_CHILD"
    # Deepest assigned unit wins
    assert claims.org_unit_id == sales["id"]


@pytest.mark.asyncio
async def test_login_self_scope_admin_is_rejected(client: AsyncClient, admin):
    tenant = await admin.create_tenant("Acme Corp", "acme")
    user = await admin.register("alice", tenant_code="acme")
    role = await admin.create_role("tenant_admin", tenant_id=tenant["id"], data_scope="SELF")
    await admin.assign(user["id"], tenant_id=tenant["id"], role_ids=[role["id"]])

    response = await admin.login("alice")

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "INSUFFICIENT_DATA_SCOPE"
    assert response.json()["error"]["message"] == "insufficient data scope"


@pytest.mark.asyncio
async def test_login_expired_membership_is_unavailable(client: AsyncClient, admin):
    user = await admin.register("root")
    role = await admin.create_role("super_admin", data_scope="ALL")
    await admin.assign(
        user["id"], role_ids=[role["id"]], end_at="2000-01-01T00:00:00Z"
    )

    response = await admin.login("root")

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "SERVICE_UNAVAILABLE"


@pytest.mark.asyncio
async def test_login_without_membership_is_unavailable(client: AsyncClient, admin):
    await admin.register("loner")

    response = await admin.login("loner")

    assert response.status_code == 503


@pytest.mark.asyncio
async def test_login_future_start_still_counts(client: AsyncClient, admin):
    """Only end_at gates a membership; a future start_at is not checked"""
    user = await admin.register("root")
    role = await admin.create_role("super_admin", data_scope="ALL")
    await admin.assign(user["id"], role_ids=[role["id"]], start_at="2999-01-01T00:00:00Z")

    response = await admin.login("root")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_login_invalid_credentials(client: AsyncClient, admin, platform_admin):
    response = await admin.login("root", password="WrongPassword!")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"

    response = await admin.login("nobody")
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_client_credentials_grant_rejected(client: AsyncClient):
    response = await client.post(
        "/auth/login", json={"grant_type": "client_credentials", "client_id": "svc"}
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_GRANT_TYPE"


@pytest.mark.asyncio
async def test_register_duplicate_username(client: AsyncClient, admin):
    await admin.register("root")

    response = await client.post(
        "/auth/register", json={"username": "root", "password": "AnotherPass123!"}
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "USERNAME_ALREADY_EXISTS"
