from abc import ABC, abstractmethod
from typing import List, Optional

from src.domain.entities import Role


class IRoleRepository(ABC):
    """Role repository interface - application layer"""

    @abstractmethod
    async def list_by_ids(self, role_ids: List[int]) -> List[Role]:
        """Get roles by IDs, in no particular order. Unknown IDs are skipped."""
        pass

    @abstractmethod
    async def list_codes_by_ids(self, role_ids: List[int]) -> List[str]:
        """Get role codes by role IDs"""
        pass

    @abstractmethod
    async def get_by_code(self, tenant_id: int, code: str) -> Optional[Role]:
        """Get role by code within a tenant"""
        pass

    @abstractmethod
    async def create(self, role: Role) -> Role:
        """Create a new role"""
        pass
