from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.scoping import scope_org_units
from src.app.repositories.org_unit_repository import IOrgUnitRepository
from src.domain.entities import OrgUnit
from src.domain.viewer import Viewer


class OrgUnitRepository(IOrgUnitRepository):
    """OrgUnit repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_id(self, org_unit_id: int) -> Optional[OrgUnit]:
        stmt = select(OrgUnit).where(OrgUnit.id == org_unit_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_by_ids(self, org_unit_ids: List[int]) -> List[OrgUnit]:
        """Get org units by IDs, returned in the order the IDs were given"""
        if not org_unit_ids:
            return []
        stmt = select(OrgUnit).where(OrgUnit.id.in_(org_unit_ids))
        result = await self.session.execute(stmt)
        by_id = {unit.id: unit for unit in result.scalars().all()}
        return [by_id[unit_id] for unit_id in dict.fromkeys(org_unit_ids) if unit_id in by_id]

    async def list_visible(self, viewer: Viewer) -> List[OrgUnit]:
        own_unit = None
        if viewer.get_org_unit_id():
            own_unit = await self.get_by_id(viewer.get_org_unit_id())

        stmt = scope_org_units(select(OrgUnit), viewer, own_unit)
        result = await self.session.execute(stmt.order_by(OrgUnit.path))
        return list(result.scalars().all())

    async def create(self, org_unit: OrgUnit) -> OrgUnit:
        """Create an org unit; its path is the parent's path plus its own id"""
        parent_path = "/"
        if org_unit.parent_id is not None:
            parent = await self.get_by_id(org_unit.parent_id)
            if parent is not None:
                parent_path = parent.path

        self.session.add(org_unit)
        await self.session.flush()

        org_unit.path = f"{parent_path}{org_unit.id}/"
        self.session.add(org_unit)
        await self.session.flush()
        await self.session.refresh(org_unit)
        return org_unit
