from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from src.domain.entities import TokenKind


class IUserTokenRepository(ABC):
    """Issued-token store interface - application layer"""

    @abstractmethod
    async def add_token(
        self,
        user_id: int,
        tenant_id: int,
        kind: TokenKind,
        token: str,
        expires_at: datetime,
        client_id: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> None:
        """Record an issued token; only its digest is stored"""
        pass

    @abstractmethod
    async def exists_refresh_token(self, user_id: int, refresh_token: str) -> bool:
        """Whether the refresh token is currently recorded (and unexpired) for the user"""
        pass

    @abstractmethod
    async def remove_refresh_token(self, user_id: int, refresh_token: str) -> bool:
        """
        Atomically delete the refresh token.

        Returns True only for the caller whose delete actually removed the row,
        so concurrent rotations of the same token have exactly one winner.
        """
        pass

    @abstractmethod
    async def remove_all_by_user_id(self, user_id: int) -> int:
        """Delete every access and refresh token of a user. Returns count."""
        pass
