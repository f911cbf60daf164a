"""
Use Case: Assign Membership

Binds a user to a tenant and replaces the membership's role, position and
org-unit bindings in one transaction.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, field_validator

from libs.result import Error, Result, Return
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import as_naive_utc
from src.domain.entities import AssignmentStatus, AuditEvent, MembershipStatus


class AssignMembershipCommand(BaseModel):
    user_id: int
    tenant_id: int = 0
    role_ids: List[int] = []
    position_ids: List[int] = []
    org_unit_ids: List[int] = []
    status: MembershipStatus = MembershipStatus.ACTIVE
    assignment_status: AssignmentStatus = AssignmentStatus.ACTIVE
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    assigned_by: Optional[int] = None
    is_primary: bool = False

    @field_validator("start_at", "end_at")
    @classmethod
    def _to_naive_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_naive_utc(value)


class AssignMembershipResponse(BaseModel):
    """Response DTO for AssignMembershipUseCase"""

    membership_id: int
    tenant_id: int
    user_id: int
    role_id: Optional[int]
    position_id: Optional[int]
    org_unit_id: Optional[int]


class AssignMembershipUseCase:
    """
    Assign a user to a tenant with roles, positions and org units.

    Business Logic:
    1. User must exist; tenant must exist unless it is the platform (0)
    2. Every role and org unit must exist in the membership's tenant
    3. Membership is created or updated, bindings are replaced
    4. The membership's role_id / position_id / org_unit_id follow the first
       assigned id of each list
    """

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(
        self, command: AssignMembershipCommand
    ) -> Result[AssignMembershipResponse]:
        async with self.uow:
            if await self.uow.users.get_by_id(command.user_id) is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            if command.tenant_id > 0:
                if await self.uow.tenants.get_by_id(command.tenant_id) is None:
                    return Return.err(Error("TENANT_NOT_FOUND", "Tenant not found"))

            if command.role_ids:
                roles = await self.uow.roles.list_by_ids(command.role_ids)
                found = {r.id for r in roles if r.tenant_id == command.tenant_id}
                missing = [i for i in command.role_ids if i not in found]
                if missing:
                    return Return.err(
                        Error("ROLE_NOT_FOUND", f"Roles not found in tenant: {missing}")
                    )

            if command.org_unit_ids:
                units = await self.uow.org_units.list_by_ids(command.org_unit_ids)
                found = {u.id for u in units if u.tenant_id == command.tenant_id}
                missing = [i for i in command.org_unit_ids if i not in found]
                if missing:
                    return Return.err(
                        Error(
                            "ORG_UNIT_NOT_FOUND",
                            f"Org units not found in tenant: {missing}",
                        )
                    )

            membership = await self.uow.memberships.assign_tenant(
                command.user_id,
                command.tenant_id,
                status=command.status,
                start_at=command.start_at,
                end_at=command.end_at,
                assigned_by=command.assigned_by,
                is_primary=command.is_primary,
            )

            binding = dict(
                status=command.assignment_status,
                start_at=command.start_at,
                end_at=command.end_at,
                assigned_by=command.assigned_by,
            )
            await self.uow.memberships.assign_roles(membership, command.role_ids, **binding)
            await self.uow.memberships.assign_positions(
                membership, command.position_ids, **binding
            )
            await self.uow.memberships.assign_org_units(
                membership, command.org_unit_ids, **binding
            )

            await self.uow.audit_events.create(
                AuditEvent(
                    tenant_id=command.tenant_id,
                    user_id=command.user_id,
                    action="membership_assigned",
                    event_metadata={
                        "role_ids": command.role_ids,
                        "position_ids": command.position_ids,
                        "org_unit_ids": command.org_unit_ids,
                    },
                )
            )

            await self.uow.commit()

            return Return.ok(
                AssignMembershipResponse(
                    membership_id=membership.id,
                    tenant_id=membership.tenant_id,
                    user_id=membership.user_id,
                    role_id=membership.role_id,
                    position_id=membership.position_id,
                    org_unit_id=membership.org_unit_id,
                )
            )
