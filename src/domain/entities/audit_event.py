"""
AuditEvent Entity

Immutable log of authentication events.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, Index, JSON, SQLModel

from src.domain.base import utcnow


class AuditEvent(SQLModel, table=True):
    """
    AuditEvent entity - immutable log of login, refresh and logout events.

    Business Rules:
    - Immutable (never updated or deleted)
    - tenant_id 0 for platform events
    - Metadata stores additional context (client id, device id, ...)
    """

    __tablename__ = "audit_events"

    id: UUID = Field(default_factory=uuid4, primary_key=True)

    tenant_id: int = Field(default=0, index=True)
    user_id: Optional[int] = Field(default=None, index=True)

    action: str = Field(max_length=100)  # e.g., "login", "logout"
    event_metadata: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_audit_created_at", "created_at"),
        Index("idx_audit_tenant_action", "tenant_id", "action"),
    )
