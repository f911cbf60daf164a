"""
Use Cases

Organized into domain folders:
- auth/: Login, refresh rotation, logout, token validation, registration
- admin/: Tenant, role, org-unit and membership bootstrap
- org_units/: Viewer-scoped reads

Import from subdirectories for better organization.
"""

from .auth import (
    LoginUseCase,
    RefreshTokenUseCase,
    LogoutUseCase,
    ValidateTokenUseCase,
    WhoAmIUseCase,
    RegisterUserUseCase,
)
from .admin import (
    CreateTenantUseCase,
    CreateRoleUseCase,
    CreateOrgUnitUseCase,
    AssignMembershipUseCase,
)
from .org_units import ListVisibleOrgUnitsUseCase

__all__ = [
    # Auth
    "LoginUseCase",
    "RefreshTokenUseCase",
    "LogoutUseCase",
    "ValidateTokenUseCase",
    "WhoAmIUseCase",
    "RegisterUserUseCase",
    # Admin
    "CreateTenantUseCase",
    "CreateRoleUseCase",
    "CreateOrgUnitUseCase",
    "AssignMembershipUseCase",
    # Org units
    "ListVisibleOrgUnitsUseCase",
]
