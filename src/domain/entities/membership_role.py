"""
MembershipRole Entity

Many-to-many binding between a membership and a role.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import AssignmentStatus


class MembershipRole(SQLModel, table=True):
    """
    Business Rules:
    - (tenant_id, membership_id, role_id) must be unique
    - Binding is live while end_at is absent or in the future
    """

    __tablename__ = "membership_roles"

    id: Optional[int] = Field(default=None, primary_key=True)

    tenant_id: int = Field(default=0, nullable=False)
    membership_id: int = Field(foreign_key="memberships.id", nullable=False)
    role_id: int = Field(nullable=False)

    is_primary: bool = Field(default=False)
    status: AssignmentStatus = Field(default=AssignmentStatus.ACTIVE)

    start_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    end_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))

    assigned_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
    assigned_by: Optional[int] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index(
            "uix_mem_role_tenant_memid_role",
            "tenant_id",
            "membership_id",
            "role_id",
            unique=True,
        ),
        Index("idx_mem_role_role_id", "role_id"),
        Index("idx_mem_role_membership_id", "membership_id"),
    )
