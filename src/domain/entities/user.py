"""
User Entity

Represents a person with credentials, homed in one tenant (0 = platform).
"""

from datetime import datetime
from typing import Optional

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utcnow

from .enums import UserStatus


class User(SQLModel, table=True):
    """
    User entity - a login identity.

    Business Rules:
    - Username must be unique across all users
    - Password stored as bcrypt hash (cost factor 12)
    - tenant_id selects which membership is resolved at login;
      0 means the platform tenant
    """

    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(default=0, index=True)

    username: str = Field(unique=True, index=True, max_length=64)
    nickname: Optional[str] = Field(default=None, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    status: UserStatus = Field(default=UserStatus.active)

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, sa_column=Column(DateTime))
    last_login_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime))
