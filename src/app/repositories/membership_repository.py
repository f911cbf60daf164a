from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, NamedTuple, Optional

from src.domain.entities import AssignmentStatus, Membership, MembershipStatus


class MembershipIds(NamedTuple):
    role_ids: List[int]
    position_ids: List[int]
    org_unit_ids: List[int]


class IMembershipRepository(ABC):
    """Membership repository interface - application layer"""

    @abstractmethod
    async def get_by_user_and_tenant(
        self, user_id: int, tenant_id: int
    ) -> Optional[Membership]:
        """Get membership by user and tenant"""
        pass

    @abstractmethod
    async def list_membership_all_ids(
        self, user_id: int, tenant_id: int
    ) -> Optional[MembershipIds]:
        """
        Get the role, position and org-unit IDs bound to the user's membership.

        Only the membership and bindings whose end_at is absent or in the
        future count; start_at is not checked. Returns None when no such
        membership exists.
        """
        pass

    @abstractmethod
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
        """Create or update the single membership row for (tenant, user)"""
        pass

    @abstractmethod
    async def assign_roles(
        self,
        membership: Membership,
        role_ids: List[int],
        status: AssignmentStatus = AssignmentStatus.ACTIVE,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        assigned_by: Optional[int] = None,
    ) -> None:
        """Replace the membership's role bindings and refresh membership.role_id"""
        pass

    @abstractmethod
    async def assign_positions(
        self,
        membership: Membership,
        position_ids: List[int],
        status: AssignmentStatus = AssignmentStatus.ACTIVE,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        assigned_by: Optional[int] = None,
    ) -> None:
        """Replace the membership's position bindings and refresh membership.position_id"""
        pass

    @abstractmethod
    async def assign_org_units(
        self,
        membership: Membership,
        org_unit_ids: List[int],
        status: AssignmentStatus = AssignmentStatus.ACTIVE,
        start_at: Optional[datetime] = None,
        end_at: Optional[datetime] = None,
        assigned_by: Optional[int] = None,
    ) -> None:
        """Replace the membership's org-unit bindings and refresh membership.org_unit_id"""
        pass
