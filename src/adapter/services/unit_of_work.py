from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.audit_event_repository import AuditEventRepository
from src.adapter.repositories.membership_repository import MembershipRepository
from src.adapter.repositories.org_unit_repository import OrgUnitRepository
from src.adapter.repositories.role_repository import RoleRepository
from src.adapter.repositories.tenant_repository import TenantRepository
from src.adapter.repositories.user_repository import UserRepository
from src.adapter.repositories.user_token_repository import UserTokenRepository
from src.app.services.unit_of_work import UnitOfWork


class SqlAlchemyUnitOfWork(UnitOfWork):
    """SQLAlchemy implementation of UnitOfWork pattern"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def __aenter__(self):
        # Initialize all repositories with the session
        self.users = UserRepository(self.session)
        self.tenants = TenantRepository(self.session)
        self.memberships = MembershipRepository(self.session)
        self.roles = RoleRepository(self.session)
        self.org_units = OrgUnitRepository(self.session)
        self.user_tokens = UserTokenRepository(self.session)
        self.audit_events = AuditEventRepository(self.session)
        return self

    async def __aexit__(self, *args):
        await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()
