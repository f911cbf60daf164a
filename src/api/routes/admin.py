"""
Admin API Routes - Bootstrap Endpoints

Create tenants, roles and org units, and assign memberships. Authentication
is via Admin API Key, not user tokens.
"""

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from src.api.error import ClientError, ServerError
from src.api.utils.admin_auth import verify_admin_api_key
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.admin import (
    AssignMembershipCommand,
    AssignMembershipResponse,
    AssignMembershipUseCase,
    CreateOrgUnitResponse,
    CreateOrgUnitUseCase,
    CreateRoleCommand,
    CreateRoleResponse,
    CreateRoleUseCase,
    CreateTenantResponse,
    CreateTenantUseCase,
)
from src.depends import get_unit_of_work
from src.domain.entities import AssignmentStatus, DataScope, MembershipStatus, RoleType

router = APIRouter(
    prefix="/admin", tags=["Admin"], dependencies=[Depends(verify_admin_api_key)]
)

NOT_FOUND_CODES = ("USER_NOT_FOUND", "TENANT_NOT_FOUND", "ROLE_NOT_FOUND", "ORG_UNIT_NOT_FOUND")
CONFLICT_CODES = ("TENANT_CODE_ALREADY_EXISTS", "ROLE_CODE_ALREADY_EXISTS")


def raise_admin_error(error):
    if error.code in NOT_FOUND_CODES:
        raise ClientError(error, status_code=status.HTTP_404_NOT_FOUND)
    if error.code in CONFLICT_CODES:
        raise ClientError(error, status_code=status.HTTP_409_CONFLICT)
    raise ServerError(error)


class CreateTenantRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=64)


@router.post(
    "/tenants", status_code=status.HTTP_201_CREATED, response_model=CreateTenantResponse
)
async def create_tenant(
    request: CreateTenantRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Create Tenant

    Requires: X-Admin-API-Key header

    Raises:
        - 401 Unauthorized: Missing or invalid admin API key
        - 409 Conflict: TENANT_CODE_ALREADY_EXISTS
    """
    result = await CreateTenantUseCase(uow).execute(request.name, request.code)
    if result.is_err():
        raise_admin_error(result.error)
    return result.value


class CreateRoleRequest(BaseModel):
    tenant_id: int = Field(0, ge=0, description="0 for a platform role")
    name: str = Field(..., min_length=1, max_length=128)
    code: str = Field(..., min_length=1, max_length=64)
    type: RoleType = RoleType.CUSTOM
    data_scope: Optional[DataScope] = None
    is_platform_admin: bool = False
    is_tenant_admin: bool = False


@router.post("/roles", status_code=status.HTTP_201_CREATED, response_model=CreateRoleResponse)
async def create_role(request: CreateRoleRequest, uow: UnitOfWork = Depends(get_unit_of_work)):
    """
    Create Role

    Requires: X-Admin-API-Key header

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: ROLE_CODE_ALREADY_EXISTS
    """
    result = await CreateRoleUseCase(uow).execute(CreateRoleCommand(**request.model_dump()))
    if result.is_err():
        raise_admin_error(result.error)
    return result.value


class CreateOrgUnitRequest(BaseModel):
    tenant_id: int = Field(0, ge=0)
    name: str = Field(..., min_length=1, max_length=255)
    code: Optional[str] = Field(None, max_length=64)
    parent_id: Optional[int] = None


@router.post(
    "/org-units", status_code=status.HTTP_201_CREATED, response_model=CreateOrgUnitResponse
)
async def create_org_unit(
    request: CreateOrgUnitRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Create Org Unit

    Requires: X-Admin-API-Key header

    Raises:
        - 404 Not Found: TENANT_NOT_FOUND, ORG_UNIT_NOT_FOUND (parent)
    """
    result = await CreateOrgUnitUseCase(uow).execute(
        request.tenant_id, request.name, code=request.code, parent_id=request.parent_id
    )
    if result.is_err():
        raise_admin_error(result.error)
    return result.value


class AssignMembershipRequest(BaseModel):
    user_id: int
    tenant_id: int = Field(0, ge=0)
    role_ids: List[int] = []
    position_ids: List[int] = []
    org_unit_ids: List[int] = []
    status: MembershipStatus = MembershipStatus.ACTIVE
    assignment_status: AssignmentStatus = AssignmentStatus.ACTIVE
    start_at: Optional[datetime] = None
    end_at: Optional[datetime] = None
    assigned_by: Optional[int] = None
    is_primary: bool = False


@router.post(
    "/memberships", status_code=status.HTTP_200_OK, response_model=AssignMembershipResponse
)
async def assign_membership(
    request: AssignMembershipRequest, uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    Assign Membership

    Creates or updates the user's membership in the tenant and replaces its
    role, position and org-unit bindings.

    Requires: X-Admin-API-Key header

    Raises:
        - 404 Not Found: USER_NOT_FOUND, TENANT_NOT_FOUND, ROLE_NOT_FOUND,
          ORG_UNIT_NOT_FOUND
    """
    result = await AssignMembershipUseCase(uow).execute(
        AssignMembershipCommand(**request.model_dump())
    )
    if result.is_err():
        raise_admin_error(result.error)
    return result.value
