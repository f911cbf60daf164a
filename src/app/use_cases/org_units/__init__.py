"""
Org Unit Use Cases

Viewer-scoped reads of the organization hierarchy.
"""

from .list_visible_org_units_use_case import (
    ListVisibleOrgUnitsUseCase,
    OrgUnitInfo,
)

__all__ = [
    "ListVisibleOrgUnitsUseCase",
    "OrgUnitInfo",
]
