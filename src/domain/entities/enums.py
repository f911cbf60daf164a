"""
Domain Enums

All enumeration types used across domain entities and token claims.
"""

from enum import Enum


class UserStatus(str, Enum):
    """User account status"""

    active = "active"
    disabled = "disabled"


class TenantStatus(str, Enum):
    """Tenant status"""

    active = "active"
    suspended = "suspended"


class MembershipStatus(str, Enum):
    """Status of a user's membership in a tenant"""

    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"
    EXPIRED = "EXPIRED"


class AssignmentStatus(str, Enum):
    """Status of a membership's role/position/org-unit binding"""

    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    DISABLED = "DISABLED"
    EXPIRED = "EXPIRED"


class RoleType(str, Enum):
    SYSTEM = "SYSTEM"
    CUSTOM = "CUSTOM"
    TEMPLATE = "TEMPLATE"


class DataScope(str, Enum):
    """
    How much of the org hierarchy a role's holder may see.

    Declared from least to most permissive.
    """

    SELF = "SELF"
    UNIT_ONLY = "UNIT_ONLY"
    UNIT_AND_CHILD = "UNIT_AND_CHILD"
    SELECTED_UNITS = "SELECTED_UNITS"
    ALL = "ALL"


class TokenKind(str, Enum):
    access = "access"
    refresh = "refresh"


class GrantType(str, Enum):
    password = "password"
    refresh_token = "refresh_token"
    client_credentials = "client_credentials"
