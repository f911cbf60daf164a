"""
Use Case: Create Role

Admin creation of a role with its data scope and admin capability flags.
"""

from typing import Optional

from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import DataScope, Role, RoleType


class CreateRoleCommand(BaseModel):
    tenant_id: int = 0
    name: str
    code: str
    type: RoleType = RoleType.CUSTOM
    data_scope: Optional[DataScope] = None
    is_platform_admin: bool = False
    is_tenant_admin: bool = False


class CreateRoleResponse(BaseModel):
    """Response DTO for CreateRoleUseCase"""

    id: int
    tenant_id: int
    code: str
    data_scope: Optional[DataScope]


class CreateRoleUseCase:
    """
    Create a role.

    Business Logic:
    1. Tenant must exist (tenant 0 is the platform and always exists)
    2. Code must be unique within the tenant
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, command: CreateRoleCommand) -> Result[CreateRoleResponse]:
        async with self.uow:
            if command.tenant_id > 0:
                if await self.uow.tenants.get_by_id(command.tenant_id) is None:
                    return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            existing = await self.uow.roles.get_by_code(command.tenant_id, command.code)
            if existing is not None:
                return Return.err(
                    Error("ROLE_CODE_ALREADY_EXISTS", "Role code already exists in tenant")
                )

            role = await self.uow.roles.create(Role(**command.model_dump()))
            await self.uow.commit()

            return Return.ok(
                CreateRoleResponse(
                    id=role.id,
                    tenant_id=role.tenant_id,
                    code=role.code,
                    data_scope=role.data_scope,
                )
            )
