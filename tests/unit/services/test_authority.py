import random

import pytest

from src.app.services.authority import (
    EffectiveAuthority,
    check_admin_authority,
    has_platform_admin_role,
    has_tenant_admin_role,
    merge_data_scope,
    org_unit_depth,
    pick_most_specific_org_unit,
)
from src.domain.entities import DataScope, OrgUnit, RoleType


# ============================================================================
# merge_data_scope
# ============================================================================


def test_merge_empty_roles_is_self():
    assert merge_data_scope([]) == DataScope.SELF


@pytest.mark.parametrize(
    "scopes",
    [
        [DataScope.ALL],
        [DataScope.SELF, DataScope.ALL],
        [DataScope.SELECTED_UNITS, DataScope.UNIT_ONLY, DataScope.ALL, DataScope.SELF],
        [DataScope.ALL, DataScope.UNIT_AND_CHILD],
    ],
)
def test_merge_any_all_role_wins(role_factory, scopes):
    roles = [role_factory(i, f"r{i}", scope) for i, scope in enumerate(scopes)]
    for _ in range(5):
        random.shuffle(roles)
        assert merge_data_scope(roles) == DataScope.ALL


def test_merge_all_short_circuits(role_factory):
    class Exploding:
        @property
        def data_scope(self):
            raise AssertionError("roles after ALL must not be inspected")

    roles = [role_factory(1, "a", DataScope.ALL), Exploding()]
    assert merge_data_scope(roles) == DataScope.ALL


def test_merge_picks_highest_ranked_scope(role_factory):
    roles = [
        role_factory(1, "a", DataScope.UNIT_ONLY),
        role_factory(2, "b", DataScope.SELECTED_UNITS),
        role_factory(3, "c", DataScope.SELF),
        role_factory(4, "d", DataScope.UNIT_AND_CHILD),
    ]
    for _ in range(5):
        random.shuffle(roles)
        assert merge_data_scope(roles) == DataScope.SELECTED_UNITS


def test_merge_ignores_unset_and_unknown_scopes(role_factory):
    unknown = role_factory(2, "b")
    unknown.data_scope = "EVERYTHING"
    roles = [role_factory(1, "a"), unknown, role_factory(3, "c", DataScope.UNIT_ONLY)]
    assert merge_data_scope(roles) == DataScope.UNIT_ONLY


def test_merge_only_unknown_scopes_is_self(role_factory):
    unknown = role_factory(1, "a")
    unknown.data_scope = "NOPE"
    assert merge_data_scope([unknown]) == DataScope.SELF


# ============================================================================
# admin role detection
# ============================================================================


def test_platform_admin_by_structure(role_factory):
    role = role_factory(1, "ops", DataScope.ALL, RoleType.SYSTEM)
    assert has_platform_admin_role([role])


def test_platform_admin_requires_system_type_for_structure(role_factory):
    role = role_factory(1, "ops", DataScope.ALL, RoleType.CUSTOM)
    assert not has_platform_admin_role([role])


@pytest.mark.parametrize("code", ["super", "SUPER_ADMIN", "SuperAdmin"])
def test_platform_admin_by_code_is_case_insensitive(role_factory, code):
    role = role_factory(1, code, DataScope.SELF)
    assert has_platform_admin_role([role])


def test_platform_admin_by_explicit_flag(role_factory):
    role = role_factory(1, "operators", DataScope.UNIT_ONLY, is_platform_admin=True)
    assert has_platform_admin_role([role])


def test_platform_admin_false_for_plain_roles(role_factory):
    roles = [
        role_factory(1, "viewer", DataScope.SELF),
        role_factory(2, "tenant_admin", DataScope.UNIT_AND_CHILD),
    ]
    assert not has_platform_admin_role(roles)
    assert not has_platform_admin_role([])


@pytest.mark.parametrize("scope", [DataScope.ALL, DataScope.UNIT_AND_CHILD])
def test_tenant_admin_by_scope(role_factory, scope):
    assert has_tenant_admin_role([role_factory(1, "manager", scope)])


@pytest.mark.parametrize("code", ["tenant_admin", "TenantAdmin", "TENANT-ADMIN"])
def test_tenant_admin_by_code(role_factory, code):
    assert has_tenant_admin_role([role_factory(1, code, DataScope.SELF)])


def test_tenant_admin_by_explicit_flag(role_factory):
    role = role_factory(1, "owners", DataScope.UNIT_ONLY, is_tenant_admin=True)
    assert has_tenant_admin_role([role])


def test_tenant_admin_false_for_narrow_scopes(role_factory):
    roles = [
        role_factory(1, "a", DataScope.SELF),
        role_factory(2, "b", DataScope.UNIT_ONLY),
        role_factory(3, "c", DataScope.SELECTED_UNITS),
    ]
    assert not has_tenant_admin_role(roles)


# ============================================================================
# pick_most_specific_org_unit
# ============================================================================


@pytest.mark.parametrize(
    "path,depth",
    [("", 0), ("/", 0), ("/1/", 1), ("/1/2/3/", 3), ("1/2", 2), ("//1//2//", 2)],
)
def test_org_unit_depth(path, depth):
    assert org_unit_depth(OrgUnit(id=1, name="u", path=path)) == depth


def test_pick_deepest_unit():
    units = [
        OrgUnit(id=1, name="root", path="/1/"),
        OrgUnit(id=2, name="dept", path="/1/2/"),
        OrgUnit(id=3, name="team", path="/1/2/3/"),
    ]
    picked = pick_most_specific_org_unit(units)
    assert picked.id == 3
    assert picked.path == "/1/2/3/"


def test_pick_keeps_first_on_tie():
    units = [
        OrgUnit(id=1, name="root", path="/1/"),
        OrgUnit(id=7, name="a", path="/1/7/"),
        OrgUnit(id=8, name="b", path="/1/8/"),
    ]
    assert pick_most_specific_org_unit(units).id == 7


def test_pick_empty_is_none():
    assert pick_most_specific_org_unit([]) is None


def test_pick_unit_with_empty_path():
    unit = OrgUnit(id=4, name="floating", path="")
    assert pick_most_specific_org_unit([unit]) is unit


# ============================================================================
# check_admin_authority
# ============================================================================


def test_gate_rejects_non_admin():
    error = check_admin_authority(EffectiveAuthority(data_scope=DataScope.ALL))
    assert error.code == "INSUFFICIENT_AUTHORITY"
    assert error.message == "insufficient authority"


def test_gate_rejects_self_scope_even_for_admin():
    error = check_admin_authority(
        EffectiveAuthority(data_scope=DataScope.SELF, is_tenant_admin=True)
    )
    assert error.code == "INSUFFICIENT_DATA_SCOPE"
    assert error.message == "insufficient data scope"


def test_gate_authority_checked_before_scope():
    error = check_admin_authority(EffectiveAuthority(data_scope=DataScope.SELF))
    assert error.code == "INSUFFICIENT_AUTHORITY"


@pytest.mark.parametrize(
    "authority",
    [
        EffectiveAuthority(data_scope=DataScope.ALL, is_platform_admin=True),
        EffectiveAuthority(data_scope=DataScope.UNIT_AND_CHILD, is_tenant_admin=True),
        EffectiveAuthority(data_scope=DataScope.UNIT_ONLY, is_tenant_admin=True),
    ],
)
def test_gate_allows_admins_with_scope(authority):
    assert check_admin_authority(authority) is None
