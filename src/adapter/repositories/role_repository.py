from typing import List, Optional

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.role_repository import IRoleRepository
from src.domain.entities import Role


class RoleRepository(IRoleRepository):
    """Role repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_by_ids(self, role_ids: List[int]) -> List[Role]:
        """Get roles by IDs, returned in the order the IDs were given"""
        if not role_ids:
            return []
        stmt = select(Role).where(Role.id.in_(role_ids))
        result = await self.session.execute(stmt)
        by_id = {role.id: role for role in result.scalars().all()}
        return [by_id[role_id] for role_id in dict.fromkeys(role_ids) if role_id in by_id]

    async def list_codes_by_ids(self, role_ids: List[int]) -> List[str]:
        roles = await self.list_by_ids(role_ids)
        return [role.code for role in roles if role.code]

    async def get_by_code(self, tenant_id: int, code: str) -> Optional[Role]:
        stmt = select(Role).where(Role.tenant_id == tenant_id, Role.code == code)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, role: Role) -> Role:
        self.session.add(role)
        await self.session.flush()
        await self.session.refresh(role)
        return role
