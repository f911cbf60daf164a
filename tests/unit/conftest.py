import bcrypt
import pytest
from unittest.mock import AsyncMock, MagicMock

from src.domain.entities import DataScope, Role, RoleType, User, UserStatus

PASSWORD = "SecurePass123!"


@pytest.fixture
def mock_uow():
    uow = MagicMock()
    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=False)  # Must return False to not suppress exceptions
    uow.commit = AsyncMock()
    uow.rollback = AsyncMock()

    # Every repository method is awaitable
    uow.users = AsyncMock()
    uow.tenants = AsyncMock()
    uow.memberships = AsyncMock()
    uow.roles = AsyncMock()
    uow.org_units = AsyncMock()
    uow.user_tokens = AsyncMock()
    uow.audit_events = AsyncMock()

    # List lookups default to empty results
    uow.roles.list_by_ids.return_value = []
    uow.roles.list_codes_by_ids.return_value = []
    uow.org_units.list_by_ids.return_value = []
    return uow


@pytest.fixture
def password_hash():
    return bcrypt.hashpw(PASSWORD.encode(), bcrypt.gensalt(4)).decode()


@pytest.fixture
def platform_user(password_hash):
    return User(
        id=1,
        tenant_id=0,
        username="root",
        password_hash=password_hash,
        status=UserStatus.active,
    )


@pytest.fixture
def tenant_user(password_hash):
    return User(
        id=2,
        tenant_id=5,
        username="alice",
        password_hash=password_hash,
        status=UserStatus.active,
    )


def make_role(role_id, code, data_scope=None, role_type=RoleType.CUSTOM, tenant_id=0, **flags):
    return Role(
        id=role_id,
        tenant_id=tenant_id,
        name=code,
        code=code,
        type=role_type,
        data_scope=data_scope,
        **flags,
    )


@pytest.fixture
def super_role():
    return make_role(1, "super", DataScope.UNIT_ONLY, RoleType.SYSTEM)


@pytest.fixture
def tenant_admin_role():
    return make_role(2, "tenant_admin", DataScope.UNIT_AND_CHILD, tenant_id=5)


@pytest.fixture
def role_factory():
    return make_role
