from typing import List

from fastapi import APIRouter, Depends, status

from src.api.error import ServerError
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.org_units import ListVisibleOrgUnitsUseCase, OrgUnitInfo
from src.depends import get_operator, get_unit_of_work, get_viewer
from src.domain.viewer import Viewer

router = APIRouter(prefix="/org-units", tags=["Org Units"])


@router.get(
    "",
    status_code=status.HTTP_200_OK,
    response_model=List[OrgUnitInfo],
    dependencies=[Depends(get_operator)],
)
async def list_org_units(
    viewer: Viewer = Depends(get_viewer), uow: UnitOfWork = Depends(get_unit_of_work)
):
    """
    List the org units visible to the operator

    Visibility follows the operator's tenant, data scope and effective org
    unit as baked into the access token.

    Raises:
        - 401 Unauthorized: Missing or invalid operator metadata
    """
    result = await ListVisibleOrgUnitsUseCase(uow).execute(viewer)
    if result.is_err():
        raise ServerError(result.error)
    return result.value
