"""
OrgUnit Entity

Hierarchical organization unit with a materialized path such as "/1/10/".
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow


class OrgUnit(SQLModel, table=True):
    """
    OrgUnit entity.

    Business Rules:
    - path lists the ids from the root down to this unit, "/"-delimited
    - depth is the number of non-empty path segments; deeper is more specific
    """

    __tablename__ = "org_units"

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(default=0, nullable=False)
    parent_id: Optional[int] = Field(default=None)

    name: str = Field(max_length=255)
    code: Optional[str] = Field(default=None, max_length=64)
    path: str = Field(default="", max_length=1024)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_org_unit_tenant_id", "tenant_id"),
        Index("idx_org_unit_path", "path"),
    )
