"""
MembershipOrgUnit Entity

Many-to-many binding between a membership and an organization unit.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import AssignmentStatus


class MembershipOrgUnit(SQLModel, table=True):
    __tablename__ = "membership_org_units"

    id: Optional[int] = Field(default=None, primary_key=True)

    tenant_id: int = Field(default=0, nullable=False)
    membership_id: int = Field(foreign_key="memberships.id", nullable=False)
    org_unit_id: int = Field(nullable=False)

    is_primary: bool = Field(default=False)
    status: AssignmentStatus = Field(default=AssignmentStatus.ACTIVE)

    start_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    end_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    assigned_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    assigned_by: Optional[int] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index(
            "uix_mem_ou_tenant_memid_ou",
            "tenant_id",
            "membership_id",
            "org_unit_id",
            unique=True,
        ),
        Index("idx_mem_ou_org_unit_id", "org_unit_id"),
        Index("idx_mem_ou_membership_id", "membership_id"),
    )
