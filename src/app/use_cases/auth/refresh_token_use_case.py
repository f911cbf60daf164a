"""
Refresh Token Use Case

Rotates a refresh token: the presented token is consumed and a new pair is
issued against freshly resolved authority.
"""

import logging
from typing import Optional

from libs.result import Error, Result, Return
from src.api.utils.jwt import decode_refresh_token
from src.app.services.authority import AuthorityResolver
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, UserStatus
from .dtos import LoginResponse

logger = logging.getLogger(__name__)

INCORRECT_REFRESH_TOKEN = Error("INCORRECT_REFRESH_TOKEN", "invalid refresh token")


class RefreshTokenUseCase:
    """
    Use case for refresh-token rotation.

    Business Rules:
    - The user is identified by the refresh token's signed subject
    - Authority is resolved again and must still pass the admin gate
    - The token must be recorded in the store; it is deleted before the new
      pair is minted
    - Of concurrent rotations of one token only the one whose delete removed
      the row succeeds; the others get INCORRECT_REFRESH_TOKEN
    - A failing delete is logged and the rotation continues
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        refresh_token: str,
        client_id: Optional[str] = None,
        device_id: Optional[str] = None,
    ) -> Result[LoginResponse]:
        claims = decode_refresh_token(refresh_token) if refresh_token else None
        if claims is None:
            return Return.err(INCORRECT_REFRESH_TOKEN)

        async with self.uow:
            user = await self.uow.users.get_by_id(claims.user_id)
            if user is None:
                return Return.err(INCORRECT_REFRESH_TOKEN)

            if user.status == UserStatus.disabled:
                return Return.err(Error("USER_DISABLED", "User account is disabled"))

            authority = await AuthorityResolver(self.uow).resolve_admin(user)
            if authority.is_err():
                return authority

            if not await self.uow.user_tokens.exists_refresh_token(user.id, refresh_token):
                return Return.err(INCORRECT_REFRESH_TOKEN)

            try:
                removed = await self.uow.user_tokens.remove_refresh_token(
                    user.id, refresh_token
                )
            except Exception:
                logger.exception(
                    f"Failed to delete refresh token for user {user.id}, continuing"
                )
            else:
                if not removed:
                    logger.warning(f"Refresh token for user {user.id} already rotated")
                    return Return.err(INCORRECT_REFRESH_TOKEN)

            pair = await TokenService(self.uow).generate_token(
                user, authority.value, client_id=client_id, device_id=device_id
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=user.tenant_id,
                    user_id=user.id,
                    action="token_refresh",
                    event_metadata={"client_id": client_id, "device_id": device_id},
                )
            )

            await self.uow.commit()

            return Return.ok(LoginResponse(**pair.model_dump()))
