from abc import ABC, abstractmethod
from typing import Optional

from src.domain.entities import Tenant


class ITenantRepository(ABC):
    """Tenant repository interface - application layer"""

    @abstractmethod
    async def get_by_id(self, tenant_id: int) -> Optional[Tenant]:
        """Get tenant by ID"""
        pass

    @abstractmethod
    async def get_by_code(self, code: str) -> Optional[Tenant]:
        """Get tenant by its unique code"""
        pass

    @abstractmethod
    async def create(self, tenant: Tenant) -> Tenant:
        """Create a new tenant"""
        pass
