"""
Membership Entity

Binds one user to one tenant; root of all role/position/org-unit bindings.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import MembershipStatus


class Membership(SQLModel, table=True):
    """
    Membership entity - links User to Tenant.

    Business Rules:
    - (tenant_id, user_id) must be unique
    - tenant_id 0 is the platform/global membership
    - role_id / position_id / org_unit_id are a denormalized copy of the
      first binding in the join tables, maintained by the assign operations
    - Only end_at gates expiry at read time
    """

    __tablename__ = "memberships"

    id: Optional[int] = Field(default=None, primary_key=True)

    tenant_id: int = Field(default=0, nullable=False)
    user_id: int = Field(foreign_key="users.id", nullable=False)

    # Single-valued fast path
    role_id: Optional[int] = Field(default=None)
    position_id: Optional[int] = Field(default=None)
    org_unit_id: Optional[int] = Field(default=None)

    is_primary: bool = Field(default=False)
    status: MembershipStatus = Field(default=MembershipStatus.ACTIVE)

    # Effective window, either bound may be absent
    start_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    end_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    # Assignment audit
    assigned_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    assigned_by: Optional[int] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("uix_membership_tenant_user", "tenant_id", "user_id", unique=True),
        Index("idx_membership_user_id", "user_id"),
        Index("idx_membership_tenant_id", "tenant_id"),
    )
