"""
UserToken Entity

Server-side record of issued tokens, used for refresh rotation and logout.
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, Index, SQLModel

from src.domain.base import utcnow

from .enums import TokenKind


class UserToken(SQLModel, table=True):
    """
    Business Rules:
    - Tokens are stored as SHA-256 digests, never in clear
    - A refresh token is single-use: rotation deletes its row
    - Logout deletes every row of the user
    """

    __tablename__ = "user_tokens"

    id: Optional[int] = Field(default=None, primary_key=True)

    user_id: int = Field(foreign_key="users.id", nullable=False)
    tenant_id: int = Field(default=0, nullable=False)

    kind: TokenKind = Field(nullable=False)
    token_hash: str = Field(max_length=64)  # SHA-256 hex digest

    client_id: Optional[str] = Field(default=None, max_length=128)
    device_id: Optional[str] = Field(default=None, max_length=128)

    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    expires_at: datetime = Field(sa_column=Column(DateTime))

    __table_args__ = (
        Index("idx_user_token_user_kind_hash", "user_id", "kind", "token_hash"),
        Index("idx_user_token_expires_at", "expires_at"),
    )
