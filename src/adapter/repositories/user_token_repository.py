import hashlib
from datetime import datetime
from typing import Optional

from sqlalchemy import delete
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.user_token_repository import IUserTokenRepository
from src.domain.base import utcnow
from src.domain.entities import TokenKind, UserToken


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


class UserTokenRepository(IUserTokenRepository):
    """Issued-token store backed by the user_tokens table"""

    def __init__(self, session: AsyncSession):
        self.session = session

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
        self.session.add(
            UserToken(
                user_id=user_id,
                tenant_id=tenant_id,
                kind=kind,
                token_hash=hash_token(token),
                expires_at=expires_at,
                client_id=client_id,
                device_id=device_id,
            )
        )
        await self.session.flush()

    async def exists_refresh_token(self, user_id: int, refresh_token: str) -> bool:
        stmt = (
            select(UserToken.id)
            .where(
                UserToken.user_id == user_id,
                UserToken.kind == TokenKind.refresh,
                UserToken.token_hash == hash_token(refresh_token),
                UserToken.expires_at > utcnow(),
            )
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.first() is not None

    async def remove_refresh_token(self, user_id: int, refresh_token: str) -> bool:
        # A single DELETE is the check-and-delete: only one concurrent
        # transaction can see a non-zero rowcount for the same row.
        stmt = delete(UserToken).where(
            UserToken.user_id == user_id,
            UserToken.kind == TokenKind.refresh,
            UserToken.token_hash == hash_token(refresh_token),
        )
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount > 0

    async def remove_all_by_user_id(self, user_id: int) -> int:
        stmt = delete(UserToken).where(UserToken.user_id == user_id)
        result = await self.session.execute(stmt)
        await self.session.flush()
        return result.rowcount
