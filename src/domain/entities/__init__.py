"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

# Export all enums
from .enums import (
    UserStatus,
    TenantStatus,
    MembershipStatus,
    AssignmentStatus,
    RoleType,
    DataScope,
    TokenKind,
    GrantType,
)

# Export all entities
from .user import User
from .tenant import Tenant
from .membership import Membership
from .membership_role import MembershipRole
from .membership_position import MembershipPosition
from .membership_org_unit import MembershipOrgUnit
from .role import Role
from .org_unit import OrgUnit
from .user_token import UserToken
from .audit_event import AuditEvent

__all__ = [
    # Enums
    "UserStatus",
    "TenantStatus",
    "MembershipStatus",
    "AssignmentStatus",
    "RoleType",
    "DataScope",
    "TokenKind",
    "GrantType",
    # Entities
    "User",
    "Tenant",
    "Membership",
    "MembershipRole",
    "MembershipPosition",
    "MembershipOrgUnit",
    "Role",
    "OrgUnit",
    "UserToken",
    "AuditEvent",
]
