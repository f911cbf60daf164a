"""
Row-level scoping of queries by the current Viewer.

Data scopes map onto the org-unit tree as follows:
- ALL: everything in the viewer's tenant (every tenant in platform context)
- SELECTED_UNITS, UNIT_AND_CHILD: the viewer's unit and its descendants
- UNIT_ONLY, SELF, unset: the viewer's unit only
A viewer with neither a tenant nor a platform context sees nothing.
"""

from typing import Optional

from sqlalchemy import false
from sqlmodel.sql.expression import SelectOfScalar

from src.domain.entities import DataScope, OrgUnit
from src.domain.viewer import Viewer

SUBTREE_SCOPES = (DataScope.UNIT_AND_CHILD, DataScope.SELECTED_UNITS)


def scope_org_units(
    stmt: SelectOfScalar, viewer: Viewer, own_unit: Optional[OrgUnit]
) -> SelectOfScalar:
    tenant_id, has_tenant = viewer.tenant()
    if has_tenant:
        stmt = stmt.where(OrgUnit.tenant_id == tenant_id)
    elif not viewer.is_platform_context():
        return stmt.where(false())

    data_scope = viewer.get_data_scope()
    if data_scope == DataScope.ALL:
        return stmt

    # The effective unit must live in the viewer's own tenant
    if own_unit is None or own_unit.tenant_id != tenant_id:
        return stmt.where(false())

    if data_scope in SUBTREE_SCOPES:
        return stmt.where(OrgUnit.path.startswith(own_unit.path))
    return stmt.where(OrgUnit.id == own_unit.id)
