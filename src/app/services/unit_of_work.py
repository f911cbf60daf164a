from abc import ABC, abstractmethod

from src.app.repositories.audit_event_repository import IAuditEventRepository
from src.app.repositories.membership_repository import IMembershipRepository
from src.app.repositories.org_unit_repository import IOrgUnitRepository
from src.app.repositories.role_repository import IRoleRepository
from src.app.repositories.tenant_repository import ITenantRepository
from src.app.repositories.user_repository import IUserRepository
from src.app.repositories.user_token_repository import IUserTokenRepository


class UnitOfWork(ABC):
    """Abstract UnitOfWork - defines repository access and transaction management"""

    # Repository properties (initialized in __aenter__)
    users: IUserRepository
    tenants: ITenantRepository
    memberships: IMembershipRepository
    roles: IRoleRepository
    org_units: IOrgUnitRepository
    user_tokens: IUserTokenRepository
    audit_events: IAuditEventRepository

    @abstractmethod
    async def __aenter__(self):
        pass

    @abstractmethod
    async def __aexit__(self, *args):
        pass

    @abstractmethod
    async def commit(self):
        pass

    @abstractmethod
    async def rollback(self):
        pass
