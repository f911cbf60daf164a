"""
Role Entity

A named bundle of authority inside a tenant, carrying its data scope.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import DataScope, RoleType


class Role(SQLModel, table=True):
    """
    Role entity.

    Business Rules:
    - (tenant_id, code) must be unique
    - data_scope may be unset; unset scopes do not take part in merging
    - is_platform_admin / is_tenant_admin are explicit capability flags;
      code-based admin detection is kept only as a fallback
    """

    __tablename__ = "roles"

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(default=0, nullable=False)

    name: str = Field(max_length=128)
    code: str = Field(max_length=64)

    type: RoleType = Field(default=RoleType.CUSTOM)
    data_scope: Optional[DataScope] = Field(default=None)

    is_platform_admin: bool = Field(default=False)
    is_tenant_admin: bool = Field(default=False)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("uix_role_tenant_code", "tenant_id", "code", unique=True),
    )
