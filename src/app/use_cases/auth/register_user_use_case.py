"""
Register User Use Case

Creates a login identity. The user gets no membership here; authority comes
only from memberships assigned by an administrator.
"""

import logging

import bcrypt

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User, UserStatus
from .dtos import RegisterUserCommand, RegisterUserResponse

logger = logging.getLogger(__name__)


class RegisterUserUseCase:
    """
    Use case for user registration.

    Business Rules:
    - Username must be unique
    - Password hashed with bcrypt (cost factor 12)
    - tenant_code selects the home tenant; unknown or absent codes give the
      platform tenant (0)
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: RegisterUserCommand) -> Result[RegisterUserResponse]:
        async with self.uow:
            existing = await self.uow.users.get_by_username(command.username)
            if existing is not None:
                return Return.err(
                    Error("USERNAME_ALREADY_EXISTS", "Username already registered")
                )

            tenant_id = 0
            if command.tenant_code:
                tenant = await self.uow.tenants.get_by_code(command.tenant_code)
                if tenant is not None:
                    tenant_id = tenant.id
                else:
                    logger.warning(
                        f"Unknown tenant code {command.tenant_code!r}, using platform tenant"
                    )

            password_hash = bcrypt.hashpw(command.password.encode(), bcrypt.gensalt(12))

            user = await self.uow.users.create(
                User(
                    tenant_id=tenant_id,
                    username=command.username,
                    nickname=command.nickname,
                    email=command.email,
                    password_hash=password_hash.decode(),
                    status=UserStatus.active,
                )
            )

            await self.uow.commit()

            return Return.ok(
                RegisterUserResponse(id=user.id, username=user.username, tenant_id=tenant_id)
            )
