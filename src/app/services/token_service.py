"""
Token Service

Mints access/refresh token pairs bound to a resolved authority and records
them in the issued-token store.
"""

from datetime import timedelta
from typing import Optional

from pydantic import BaseModel

from config import ApplicationConfig
from src.api.utils.jwt import UserTokenClaims, create_access_token, create_refresh_token
from src.app.services.authority import EffectiveAuthority
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import TokenKind, User


class TokenPair(BaseModel):
    token_type: str = "bearer"
    access_token: str
    refresh_token: str


class TokenService:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def generate_token(
        self,
        user: User,
        authority: EffectiveAuthority,
        client_id: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> TokenPair:
        """
        Mint and record a new token pair. The caller commits.

        Args:
            user: Token subject
            authority: Effective authority baked into the access token
            client_id: Optional client identifier, echoed in claims and store
            device_id: Optional device identifier, echoed in claims and store
        """
        tenant_id = user.tenant_id or 0
        access_ttl = timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_EXPIRE_MINUTES)
        refresh_ttl = timedelta(days=ApplicationConfig.REFRESH_TOKEN_EXPIRE_DAYS)

        claims = UserTokenClaims(
            user_id=user.id,
            username=user.username,
            tenant_id=tenant_id,
            org_unit_id=authority.org_unit_id,
            data_scope=authority.data_scope,
            is_platform_admin=authority.is_platform_admin,
            is_tenant_admin=authority.is_tenant_admin,
            roles=authority.role_codes,
            client_id=client_id,
            device_id=device_id,
        )
        access_token = create_access_token(claims, access_ttl)
        refresh_token = create_refresh_token(user.id, tenant_id, refresh_ttl)

        now = utcnow()
        await self.uow.user_tokens.add_token(
            user.id, tenant_id, TokenKind.access, access_token, now + access_ttl,
            client_id=client_id, device_id=device_id,
        )
        await self.uow.user_tokens.add_token(
            user.id, tenant_id, TokenKind.refresh, refresh_token, now + refresh_ttl,
            client_id=client_id, device_id=device_id,
        )

        return TokenPair(access_token=access_token, refresh_token=refresh_token)
