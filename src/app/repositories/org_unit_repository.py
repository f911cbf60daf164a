from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities import OrgUnit
from src.domain.viewer import Viewer


class IOrgUnitRepository(ABC):
    """OrgUnit repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, org_unit_id: int) -> Optional[OrgUnit]:
        """Get org unit by ID"""
        pass

    @abstractmethod
    async def list_by_ids(self, org_unit_ids: List[int]) -> List[OrgUnit]:
        """Get org units by IDs. Unknown IDs are skipped."""
        pass

    @abstractmethod
    async def list_visible(self, viewer: Viewer) -> List[OrgUnit]:
        """Get the org units the viewer's data scope allows, ordered by path"""
        pass

    @abstractmethod
    async def create(self, org_unit: OrgUnit) -> OrgUnit:
        """Create a new org unit and fill in its materialized path"""
        pass
