from typing import List, Optional

from pydantic import BaseModel

from libs.result import Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.viewer import Viewer


class OrgUnitInfo(BaseModel):
    id: int
    tenant_id: int
    parent_id: Optional[int]
    name: str
    code: Optional[str]
    path: str


class ListVisibleOrgUnitsUseCase:
    """
    List the org units the viewer may see.

    Scoping is done by the repository from the viewer's tenant, data scope
    and effective org unit; an anonymous viewer sees nothing.
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, viewer: Viewer) -> Result[List[OrgUnitInfo]]:
        async with self.uow:
            units = await self.uow.org_units.list_visible(viewer)
            return Return.ok(
                [
                    OrgUnitInfo(
                        id=u.id,
                        tenant_id=u.tenant_id,
                        parent_id=u.parent_id,
                        name=u.name,
                        code=u.code,
                        path=u.path,
                    )
                    for u in units
                ]
            )
