from datetime import datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.membership_binding_repository import (
    MembershipBindingRepository,
)
from src.app.repositories.membership_repository import (
    IMembershipRepository,
    MembershipIds,
)
from src.domain.base import utcnow
from src.domain.entities import (
    AssignmentStatus,
    Membership,
    MembershipOrgUnit,
    MembershipPosition,
    MembershipRole,
    MembershipStatus,
)


class MembershipRepository(IMembershipRepository):
    """Membership repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.roles = MembershipBindingRepository(session, MembershipRole, "role_id")
        self.positions = MembershipBindingRepository(
            session, MembershipPosition, "position_id"
        )
        self.org_units = MembershipBindingRepository(
            session, MembershipOrgUnit, "org_unit_id"
        )

    async def get_by_user_and_tenant(
        self, user_id: int, tenant_id: int
    ) -> Optional[Membership]:
        stmt = select(Membership).where(
            Membership.user_id == user_id, Membership.tenant_id == tenant_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_membership_all_ids(
        self, user_id: int, tenant_id: int
    ) -> Optional[MembershipIds]:
        # Only end_at gates expiry; a future start_at still counts as active
        stmt = select(Membership.id).where(
            Membership.tenant_id == tenant_id,
            Membership.user_id == user_id,
            or_(Membership.end_at.is_(None), Membership.end_at > utcnow()),
        )
        result = await self.session.execute(stmt)
        membership_id = result.scalar_one_or_none()
        if membership_id is None:
            return None

        return MembershipIds(
            role_ids=await self.roles.list_ids(membership_id, tenant_id),
            position_ids=await self.positions.list_ids(membership_id, tenant_id),
            org_unit_ids=await self.org_units.list_ids(membership_id, tenant_id),
        )

    async def assign_tenant(
        self,
        user_id: int,
        tenant_id: int,
        status: MembershipStatus = MembershipStatus.ACTIVE,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        assigned_by: Optional[int] = None,
        is_primary: bool = False,
    ) -> Membership:
        now = utcnow()
        membership = await self.get_by_user_and_tenant(user_id, tenant_id)
        if membership is None:
            membership = Membership(user_id=user_id, tenant_id=tenant_id)

        membership.status = status
        membership.start_at = start_at or membership.start_at or now
        membership.end_at = end_at
        membership.is_primary = is_primary
        membership.assigned_at = now
        membership.assigned_by = assigned_by

        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
        return membership

    async def assign_roles(
        self,
        membership: Membership,
        role_ids: List[int],
        status: AssignmentStatus = AssignmentStatus.ACTIVE,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        assigned_by: Optional[int] = None,
    ) -> None:
        assigned = await self.roles.assign(
            membership.id, membership.tenant_id, role_ids,
            status, start_at, end_at, assigned_by,
        )
        membership.role_id = assigned[0] if assigned else None
        await self._save(membership)

    async def assign_positions(
        self,
        membership: Membership,
        position_ids: List[int],
        status: AssignmentStatus = AssignmentStatus.ACTIVE,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        assigned_by: Optional[int] = None,
    ) -> None:
        assigned = await self.positions.assign(
            membership.id, membership.tenant_id, position_ids,
            status, start_at, end_at, assigned_by,
        )
        membership.position_id = assigned[0] if assigned else None
        await self._save(membership)

    async def assign_org_units(
        self,
        membership: Membership,
        org_unit_ids: List[int],
        status: AssignmentStatus = AssignmentStatus.ACTIVE,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        assigned_by: Optional[int] = None,
    ) -> None:
        assigned = await self.org_units.assign(
            membership.id, membership.tenant_id, org_unit_ids,
            status, start_at, end_at, assigned_by,
        )
        membership.org_unit_id = assigned[0] if assigned else None
        await self._save(membership)

    async def _save(self, membership: Membership) -> None:
        self.session.add(membership)
        await self.session.flush()
        await self.session.refresh(membership)
