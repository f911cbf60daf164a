import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.depends import get_unit_of_work
from src.adapter.services.unit_of_work import SqlAlchemyUnitOfWork

PASSWORD = "SecurePass123!"


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    Session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session):
    from httpx import ASGITransport
    from src.api.app import create_app

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


class AdminApi:
    """Bootstrap calls through the admin endpoints"""

    def __init__(self, client: AsyncClient):
        self.client = client
        self.headers = {"X-Admin-API-Key": ApplicationConfig.ADMIN_API_KEY}

    async def _post(self, path, payload):
        response = await self.client.post(path, json=payload, headers=self.headers)
        assert response.status_code in (200, 201), response.text
        return response.json()

    async def create_tenant(self, name, code):
        return await self._post("/admin/tenants", {"name": name, "code": code})

    async def create_role(self, code, **fields):
        return await self._post("/admin/roles", {"name": code, "code": code, **fields})

    async def create_org_unit(self, name, **fields):
        return await self._post("/admin/org-units", {"name": name, **fields})

    async def assign(self, user_id, **fields):
        return await self._post("/admin/memberships", {"user_id": user_id, **fields})

    async def register(self, username, password=PASSWORD, tenant_code=None):
        payload = {"username": username, "password": password}
        if tenant_code:
            payload["tenant_code"] = tenant_code
        return await self._post("/auth/register", payload)

    async def login(self, username, password=PASSWORD):
        return await self.client.post(
            "/auth/login",
            json={"grant_type": "password", "username": username, "password": password},
        )


@pytest_asyncio.fixture
async def admin(client):
    return AdminApi(client)


@pytest_asyncio.fixture
async def platform_admin(admin):
    """A platform user holding super_admin at tenant 0, with its login response"""
    user = await admin.register("root")
    role = await admin.create_role("super_admin", data_scope="UNIT_ONLY")
    await admin.assign(user["id"], role_ids=[role["id"]])
    response = await admin.login("root")
    assert response.status_code == 200, response.text
    return {"user": user, "tokens": response.json()}
