"""
Use Case: Create Tenant

Admin bootstrap of an isolated tenant workspace.
"""

from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import AuditEvent, Tenant


class CreateTenantResponse(BaseModel):
    """Response DTO for CreateTenantUseCase"""

    id: int
    name: str
    code: str


class CreateTenantUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, name: str, code: str) -> Result[CreateTenantResponse]:
        async with self.uow:
            if await self.uow.tenants.get_by_code(code) is not None:
                return Return.err(
                    Error("TENANT_CODE_ALREADY_EXISTS", "Tenant code already exists")
                )

            tenant = await self.uow.tenants.create(Tenant(name=name, code=code))

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=tenant.id,
                    action="tenant_created",
                    event_metadata={"code": code},
                )
            )
            await self.uow.commit()

            return Return.ok(
                CreateTenantResponse(id=tenant.id, name=tenant.name, code=tenant.code)
            )
