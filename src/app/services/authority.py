"""
Authority Service

Computes a user's effective authority (data scope, admin flags, effective org
unit, role codes) from their membership at login and refresh time. The result
is baked into the issued tokens and trusted until they expire.
"""

import logging
from typing import Iterable, List, Optional

from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import DataScope, OrgUnit, Role, RoleType, User

logger = logging.getLogger(__name__)

DATA_SCOPE_PRIORITY = {
    DataScope.SELF: 1,
    DataScope.UNIT_ONLY: 2,
    DataScope.UNIT_AND_CHILD: 3,
    DataScope.SELECTED_UNITS: 4,
    DataScope.ALL: 5,
}

# Legacy code-based detection, kept as a fallback for roles created before
# the explicit capability flags existed
PLATFORM_ADMIN_CODES = frozenset({"super", "super_admin", "superadmin"})
TENANT_ADMIN_CODES = frozenset({"tenant_admin", "tenantadmin", "tenant-admin"})

INSUFFICIENT_AUTHORITY = Error("INSUFFICIENT_AUTHORITY", "insufficient authority")
INSUFFICIENT_DATA_SCOPE = Error("INSUFFICIENT_DATA_SCOPE", "insufficient data scope")
SERVICE_UNAVAILABLE = Error("SERVICE_UNAVAILABLE", "authority lookup unavailable")


class EffectiveAuthority(BaseModel):
    """Derived per login/refresh, never stored"""

    data_scope: DataScope = DataScope.SELF
    is_platform_admin: bool = False
    is_tenant_admin: bool = False
    org_unit_id: int = 0
    role_codes: List[str] = []


def _coerce_scope(value) -> Optional[DataScope]:
    if isinstance(value, DataScope):
        return value
    try:
        return DataScope(value)
    except ValueError:
        return None


def merge_data_scope(roles: Iterable[Role]) -> DataScope:
    """
    Merge the data scopes of a role set into the most permissive one.

    ALL wins immediately. Ties keep the first scope seen; unset or
    unrecognized scopes are skipped.
    """
    merged = DataScope.SELF
    merged_priority = DATA_SCOPE_PRIORITY[merged]
    for role in roles:
        scope = _coerce_scope(role.data_scope)
        if scope is None:
            continue
        if scope == DataScope.ALL:
            return DataScope.ALL
        priority = DATA_SCOPE_PRIORITY[scope]
        if priority > merged_priority:
            merged, merged_priority = scope, priority
    return merged


def _code_in(role: Role, codes: frozenset) -> bool:
    return bool(role.code) and role.code.lower() in codes


def is_platform_admin_by_flag(role: Role) -> bool:
    return bool(role.is_platform_admin)


def is_platform_admin_by_structure(role: Role) -> bool:
    return (
        _coerce_scope(role.data_scope) == DataScope.ALL and role.type == RoleType.SYSTEM
    )


def is_platform_admin_by_code(role: Role) -> bool:
    return _code_in(role, PLATFORM_ADMIN_CODES)


def is_tenant_admin_by_flag(role: Role) -> bool:
    return bool(role.is_tenant_admin)


def is_tenant_admin_by_structure(role: Role) -> bool:
    return _coerce_scope(role.data_scope) in (DataScope.ALL, DataScope.UNIT_AND_CHILD)


def is_tenant_admin_by_code(role: Role) -> bool:
    return _code_in(role, TENANT_ADMIN_CODES)


def has_platform_admin_role(roles: Iterable[Role]) -> bool:
    return any(
        is_platform_admin_by_flag(role)
        or is_platform_admin_by_structure(role)
        or is_platform_admin_by_code(role)
        for role in roles
    )


def has_tenant_admin_role(roles: Iterable[Role]) -> bool:
    return any(
        is_tenant_admin_by_flag(role)
        or is_tenant_admin_by_structure(role)
        or is_tenant_admin_by_code(role)
        for role in roles
    )


def org_unit_depth(unit: OrgUnit) -> int:
    path = (unit.path or "").strip("/")
    if not path:
        return 0
    return len([segment for segment in path.split("/") if segment])


def pick_most_specific_org_unit(units: Iterable[OrgUnit]) -> Optional[OrgUnit]:
    """Deepest unit by materialized path; the first one wins on ties"""
    picked = None
    picked_depth = -1
    for unit in units:
        depth = org_unit_depth(unit)
        if depth > picked_depth:
            picked, picked_depth = unit, depth
    return picked


def check_admin_authority(authority: EffectiveAuthority) -> Optional[Error]:
    """
    Gate for issuing tokens.

    Returns:
        None when allowed, otherwise INSUFFICIENT_AUTHORITY (no admin flag)
        or INSUFFICIENT_DATA_SCOPE (SELF scope, even for admins)
    """
    if not (authority.is_platform_admin or authority.is_tenant_admin):
        return INSUFFICIENT_AUTHORITY
    if authority.data_scope == DataScope.SELF:
        return INSUFFICIENT_DATA_SCOPE
    return None


class AuthorityResolver:
    """
    Resolves effective authority for a user in their home tenant.

    Business Rules:
    - Membership lookup failure is fatal (SERVICE_UNAVAILABLE)
    - A timed-out lookup at any step is fatal (SERVICE_UNAVAILABLE)
    - Other role and org-unit lookup failures are logged and resolution continues
    - Tenant 0 + platform admin role forces data scope ALL
    - Tenant > 0 + tenant admin role keeps the merged data scope
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def resolve(self, user: User) -> Result[EffectiveAuthority]:
        tenant_id = user.tenant_id or 0

        try:
            ids = await self.uow.memberships.list_membership_all_ids(user.id, tenant_id)
        except Exception:
            logger.exception(
                f"Membership lookup failed for user {user.id} in tenant {tenant_id}"
            )
            return Return.err(SERVICE_UNAVAILABLE)

        if ids is None:
            logger.warning(f"No membership for user {user.id} in tenant {tenant_id}")
            return Return.err(
                Error("SERVICE_UNAVAILABLE", "membership not found for user")
            )

        try:
            roles = await self._roles(user, ids.role_ids)
            role_codes = await self._role_codes(user, ids.role_ids)
            units = await self._org_units(user, ids.org_unit_ids)
        except TimeoutError:
            logger.exception(f"Authority lookup timed out for user {user.id}")
            return Return.err(SERVICE_UNAVAILABLE)

        authority = EffectiveAuthority(
            data_scope=merge_data_scope(roles),
            role_codes=role_codes,
        )

        if tenant_id == 0 and has_platform_admin_role(roles):
            authority.is_platform_admin = True
            authority.data_scope = DataScope.ALL
        elif tenant_id > 0 and has_tenant_admin_role(roles):
            authority.is_tenant_admin = True

        unit = pick_most_specific_org_unit(units)
        if unit is not None:
            authority.org_unit_id = unit.id

        logger.info(
            f"Resolved authority for user {user.id} tenant {tenant_id}: "
            f"scope={authority.data_scope.value} "
            f"platform_admin={authority.is_platform_admin} "
            f"tenant_admin={authority.is_tenant_admin} "
            f"org_unit={authority.org_unit_id}"
        )
        return Return.ok(authority)

    # The helpers below degrade to empty results; TimeoutError propagates

    async def _roles(self, user: User, role_ids: List[int]) -> List[Role]:
        if not role_ids:
            return []
        try:
            return await self.uow.roles.list_by_ids(role_ids)
        except TimeoutError:
            raise
        except Exception:
            logger.exception(f"Role lookup failed for user {user.id}, continuing")
            return []

    async def _role_codes(self, user: User, role_ids: List[int]) -> List[str]:
        if not role_ids:
            return []
        try:
            return await self.uow.roles.list_codes_by_ids(role_ids)
        except TimeoutError:
            raise
        except Exception:
            logger.exception(f"Role code lookup failed for user {user.id}, continuing")
            return []

    async def _org_units(self, user: User, org_unit_ids: List[int]) -> List[OrgUnit]:
        if not org_unit_ids:
            return []
        try:
            return await self.uow.org_units.list_by_ids(org_unit_ids)
        except TimeoutError:
            raise
        except Exception:
            logger.exception(f"Org unit lookup failed for user {user.id}, continuing")
            return []

    async def resolve_admin(self, user: User) -> Result[EffectiveAuthority]:
        """Resolve, then apply the token-issuing gate"""
        result = await self.resolve(user)
        if result.is_err():
            return result

        denial = check_admin_authority(result.value)
        if denial is not None:
            logger.warning(f"Authority denied for user {user.id}: {denial.code}")
            return Return.err(denial)
        return result
