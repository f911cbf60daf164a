"""
Login Use Case

Authenticates a user and issues a token pair bound to their resolved
authority.
"""

import logging

import bcrypt

from libs.result import Error, Result, Return
from src.app.services.authority import AuthorityResolver
from src.app.services.token_service import TokenService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.entities import AuditEvent, GrantType, UserStatus
from .dtos import LoginCommand, LoginResponse
from .refresh_token_use_case import RefreshTokenUseCase

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = Error("INVALID_CREDENTIALS", "Invalid username or password")


class LoginUseCase:
    """
    Use case for login across grant types.

    Business Rules:
    - password: bcrypt check, user must be active, authority must pass the
      admin gate (INSUFFICIENT_AUTHORITY / INSUFFICIENT_DATA_SCOPE)
    - refresh_token: delegated to RefreshTokenUseCase
    - client_credentials and unknown grants: INVALID_GRANT_TYPE
    - Constant-time password comparison to prevent timing attacks
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: LoginCommand) -> Result[LoginResponse]:
        try:
            grant_type = GrantType(command.grant_type)
        except ValueError:
            grant_type = None

        if grant_type == GrantType.password:
            return await self._password_grant(command)
        if grant_type == GrantType.refresh_token:
            return await RefreshTokenUseCase(self.uow).execute(
                command.refresh_token or "",
                client_id=command.client_id,
                device_id=command.device_id,
            )
        return Return.err(
            Error("INVALID_GRANT_TYPE", f"Unsupported grant type: {command.grant_type}")
        )

    async def _password_grant(self, command: LoginCommand) -> Result[LoginResponse]:
        if not command.username or not command.password:
            return Return.err(INVALID_CREDENTIALS)

        async with self.uow:
            user = await self.uow.users.get_by_username(command.username)

            if user is None:
                # Hash dummy password to maintain constant time
                bcrypt.checkpw(b"dummy_password", bcrypt.gensalt(12))
                return Return.err(INVALID_CREDENTIALS)

            if not bcrypt.checkpw(command.password.encode(), user.password_hash.encode()):
                return Return.err(INVALID_CREDENTIALS)

            if user.status == UserStatus.disabled:
                return Return.err(Error("USER_DISABLED", "User account is disabled"))

            authority = await AuthorityResolver(self.uow).resolve_admin(user)
            if authority.is_err():
                return authority

            pair = await TokenService(self.uow).generate_token(
                user,
                authority.value,
                client_id=command.client_id,
                device_id=command.device_id,
            )

            user.last_login_at = utcnow()
            await self.uow.users.update(user)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=user.tenant_id,
                    user_id=user.id,
                    action="login",
                    event_metadata={
                        "username": user.username,
                        "client_id": command.client_id,
                        "device_id": command.device_id,
                    },
                )
            )

            await self.uow.commit()

            logger.info(f"User {user.id} logged in to tenant {user.tenant_id}")
            return Return.ok(LoginResponse(**pair.model_dump()))
