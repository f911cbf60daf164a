"""
Use Case: Create Org Unit

Adds a unit under an optional parent; the repository derives its path.
"""

from typing import Optional

from pydantic import BaseModel

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import OrgUnit


class CreateOrgUnitResponse(BaseModel):
    """Response DTO for CreateOrgUnitUseCase"""

    id: int
    tenant_id: int
    parent_id: Optional[int]
    path: str


class CreateOrgUnitUseCase:
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self,
        tenant_id: int,
        name: str,
        code: Optional[str] = None,
        parent_id: Optional[int] = None,
    ) -> Result[CreateOrgUnitResponse]:
        async with self.uow:
            if tenant_id > 0 and await self.uow.tenants.get_by_id(tenant_id) is None:
                return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            if parent_id is not None:
                parent = await self.uow.org_units.get_by_id(parent_id)
                # A parent from another tenant is treated as missing
                if parent is None or parent.tenant_id != tenant_id:
                    return Return.err(
                        Error("ORG_UNIT_NOT_FOUND", "Parent org unit not found")
                    )

            unit = await self.uow.org_units.create(
                OrgUnit(tenant_id=tenant_id, name=name, code=code, parent_id=parent_id)
            )
            await self.uow.commit()

            return Return.ok(
                CreateOrgUnitResponse(
                    id=unit.id,
                    tenant_id=unit.tenant_id,
                    parent_id=unit.parent_id,
                    path=unit.path,
                )
            )
