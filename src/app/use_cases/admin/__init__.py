"""Admin use cases for tenant, role, org-unit and membership bootstrap."""

from .create_tenant_use_case import CreateTenantUseCase, CreateTenantResponse
from .create_role_use_case import (
    CreateRoleUseCase,
    CreateRoleCommand,
    CreateRoleResponse,
)
from .create_org_unit_use_case import CreateOrgUnitUseCase, CreateOrgUnitResponse
from .assign_membership_use_case import (
    AssignMembershipUseCase,
    AssignMembershipCommand,
    AssignMembershipResponse,
)

__all__ = [
    "CreateTenantUseCase",
    "CreateTenantResponse",
    "CreateRoleUseCase",
    "CreateRoleCommand",
    "CreateRoleResponse",
    "CreateOrgUnitUseCase",
    "CreateOrgUnitResponse",
    "AssignMembershipUseCase",
    "AssignMembershipCommand",
    "AssignMembershipResponse",
]
