import pytest

from src.api.utils.jwt import create_refresh_token, decode_user_claims
from src.app.repositories.membership_repository import MembershipIds
from src.app.use_cases.auth import LoginCommand, LoginUseCase
from src.domain.entities import DataScope, OrgUnit, TokenKind, UserStatus

PASSWORD = "SecurePass123!"


def password_login(username="root", password=PASSWORD, **kwargs):
    return LoginCommand(grant_type="password", username=username, password=password, **kwargs)


@pytest.fixture
def platform_admin_uow(mock_uow, platform_user, super_role):
    mock_uow.users.get_by_username.return_value = platform_user
    mock_uow.memberships.list_membership_all_ids.return_value = MembershipIds([1], [], [7])
    mock_uow.roles.list_by_ids.return_value = [super_role]
    mock_uow.roles.list_codes_by_ids.return_value = ["super"]
    mock_uow.org_units.list_by_ids.return_value = [OrgUnit(id=7, name="hq", path="/7/")]
    return mock_uow


@pytest.mark.asyncio
async def test_successful_password_login(platform_admin_uow, platform_user):
    """Platform admin logs in and gets a token pair carrying its authority"""
    result = await LoginUseCase(platform_admin_uow).execute(
        password_login(client_id="web", device_id="laptop-1")
    )

    assert result.is_ok()
    data = result.value
    assert data.token_type == "bearer"
    assert data.access_token
    assert data.refresh_token

    claims = decode_user_claims(data.access_token)
    assert claims.user_id == platform_user.id
    assert claims.username == "root"
    assert claims.tenant_id == 0
    assert claims.is_platform_admin is True
    assert claims.data_scope == DataScope.ALL
    assert claims.org_unit_id == 7
    assert claims.roles == ["super"]
    assert claims.client_id == "web"
    assert claims.device_id == "laptop-1"

    # Both tokens recorded
    kinds = [call.args[2] for call in platform_admin_uow.user_tokens.add_token.await_args_list]
    assert kinds == [TokenKind.access, TokenKind.refresh]

    platform_admin_uow.users.update.assert_awaited_once()
    assert platform_user.last_login_at is not None

    audit = platform_admin_uow.audit_events.create.await_args.args[0]
    assert audit.action == "login"
    assert audit.user_id == platform_user.id
    assert audit.event_metadata["client_id"] == "web"

    platform_admin_uow.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_login_invalid_password(platform_admin_uow):
    result = await LoginUseCase(platform_admin_uow).execute(password_login(password="WrongPass!"))

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
    platform_admin_uow.memberships.list_membership_all_ids.assert_not_awaited()
    platform_admin_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_login_unknown_user(mock_uow):
    mock_uow.users.get_by_username.return_value = None

    result = await LoginUseCase(mock_uow).execute(password_login(username="ghost"))

    assert result.error.code == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_missing_password(mock_uow):
    result = await LoginUseCase(mock_uow).execute(LoginCommand(grant_type="password", username="root"))

    assert result.error.code == "INVALID_CREDENTIALS"
    mock_uow.users.get_by_username.assert_not_awaited()


@pytest.mark.asyncio
async def test_login_disabled_user(platform_admin_uow, platform_user):
    platform_user.status = UserStatus.disabled

    result = await LoginUseCase(platform_admin_uow).execute(password_login())

    assert result.error.code == "USER_DISABLED"


@pytest.mark.asyncio
async def test_login_insufficient_authority(mock_uow, platform_user, role_factory):
    """No qualifying admin role -> INSUFFICIENT_AUTHORITY, nothing issued"""
    mock_uow.users.get_by_username.return_value = platform_user
    mock_uow.memberships.list_membership_all_ids.return_value = MembershipIds([3], [], [])
    mock_uow.roles.list_by_ids.return_value = [role_factory(3, "viewer", DataScope.UNIT_ONLY)]

    result = await LoginUseCase(mock_uow).execute(password_login())

    assert result.error.code == "INSUFFICIENT_AUTHORITY"
    assert result.error.message == "insufficient authority"
    mock_uow.user_tokens.add_token.assert_not_awaited()
    mock_uow.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_login_insufficient_data_scope(mock_uow, tenant_user, role_factory):
    mock_uow.users.get_by_username.return_value = tenant_user
    mock_uow.memberships.list_membership_all_ids.return_value = MembershipIds([3], [], [])
    mock_uow.roles.list_by_ids.return_value = [
        role_factory(3, "tenant_admin", DataScope.SELF, tenant_id=5)
    ]

    result = await LoginUseCase(mock_uow).execute(password_login(username="alice"))

    assert result.error.code == "INSUFFICIENT_DATA_SCOPE"


@pytest.mark.asyncio
async def test_login_membership_lookup_failure(mock_uow, platform_user):
    mock_uow.users.get_by_username.return_value = platform_user
    mock_uow.memberships.list_membership_all_ids.side_effect = RuntimeError("db down")

    result = await LoginUseCase(mock_uow).execute(password_login())

    assert result.error.code == "SERVICE_UNAVAILABLE"


@pytest.mark.asyncio
@pytest.mark.parametrize("grant_type", ["client_credentials", "authorization_code", ""])
async def test_login_rejects_unsupported_grant(mock_uow, grant_type):
    result = await LoginUseCase(mock_uow).execute(LoginCommand(grant_type=grant_type))

    assert result.error.code == "INVALID_GRANT_TYPE"
    mock_uow.users.get_by_username.assert_not_awaited()


@pytest.mark.asyncio
async def test_login_refresh_grant_rotates(platform_admin_uow, platform_user):
    platform_admin_uow.users.get_by_id.return_value = platform_user
    platform_admin_uow.user_tokens.exists_refresh_token.return_value = True
    platform_admin_uow.user_tokens.remove_refresh_token.return_value = True
    refresh_token = create_refresh_token(platform_user.id, 0)

    result = await LoginUseCase(platform_admin_uow).execute(
        LoginCommand(grant_type="refresh_token", refresh_token=refresh_token)
    )

    assert result.is_ok()
    assert result.value.refresh_token != refresh_token
    platform_admin_uow.user_tokens.remove_refresh_token.assert_awaited_once_with(
        platform_user.id, refresh_token
    )
