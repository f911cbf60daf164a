"""
Logout Use Case

Revokes every access and refresh token of the operator.
"""

import logging

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent
from .dtos import LogoutResponse

logger = logging.getLogger(__name__)


class LogoutUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: int, tenant_id: int) -> Result[LogoutResponse]:
        async with self.uow:
            revoked = await self.uow.user_tokens.remove_all_by_user_id(user_id)

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant_id,
                    user_id=user_id,
                    action="logout",
                    event_metadata={"revoked_tokens": revoked},
                )
            )

            await self.uow.commit()

            logger.info(f"User {user_id} logged out, {revoked} tokens revoked")
            return Return.ok(LogoutResponse(status="logged_out", revoked_tokens=revoked))
