from datetime import datetime
from typing import List, Optional, Type, Union

from sqlalchemy import delete, or_
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.domain.base import utcnow
from src.domain.entities import (
    AssignmentStatus,
    MembershipOrgUnit,
    MembershipPosition,
    MembershipRole,
)

BindingModel = Union[MembershipRole, MembershipPosition, MembershipOrgUnit]


class MembershipBindingRepository:
    """
    Shared implementation for the membership join tables.

    Each instance manages one table; target_field names the column that holds
    the bound entity's id (role_id, position_id or org_unit_id).
    """

    def __init__(
        self, session: AsyncSession, model: Type[BindingModel], target_field: str
    ):
        self.session = session
        self.model = model
        self.target_field = target_field

    @property
    def _target(self):
        return getattr(self.model, self.target_field)

    async def list_ids(
        self, membership_id: int, tenant_id: int, exclude_expired: bool = True
    ) -> List[int]:
        stmt = select(self._target).where(
            self.model.membership_id == membership_id,
            self.model.tenant_id == tenant_id,
        )
        if exclude_expired:
            stmt = stmt.where(
                or_(self.model.end_at.is_(None), self.model.end_at > utcnow())
            )
        result = await self.session.execute(stmt.order_by(self.model.id))
        return [int(target_id) for target_id in result.scalars().all()]

    async def clean(self, membership_id: int, tenant_id: int) -> None:
        stmt = delete(self.model).where(
            self.model.membership_id == membership_id,
            self.model.tenant_id == tenant_id,
        )
        await self.session.execute(stmt)
        await self.session.flush()

    async def assign(
        self,
        membership_id: int,
        tenant_id: int,
        target_ids: List[int],
        status: AssignmentStatus,
        start_at: Optional[datetime],
        end_at: Optional[datetime],
        assigned_by: Optional[int],
    ) -> List[int]:
        """Replace all bindings of the membership; the first id becomes primary"""
        await self.clean(membership_id, tenant_id)

        unique_ids = list(dict.fromkeys(target_ids))
        if not unique_ids:
            return []

        now = utcnow()
        rows = [
            self.model(
                membership_id=membership_id,
                tenant_id=tenant_id,
                status=status,
                is_primary=index == 0,
                start_at=start_at or now,
                end_at=end_at,
                assigned_at=now,
                assigned_by=assigned_by,
                **{self.target_field: target_id},
            )
            for index, target_id in enumerate(unique_ids)
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return unique_ids
