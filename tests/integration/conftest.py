from contextlib import asynccontextmanager

import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import authtrail.domain.entities  # noqa: F401
from authtrail.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from authtrail.app.services.audit_recorder import AuditRecorder
from authtrail.app.services.audit_broadcaster import AuditEventBroadcaster
from authtrail.depends import get_audit_broadcaster, get_audit_recorder, get_unit_of_work
from authtrail.domain.entities import User
from tests.fixtures.users import get_user


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test.db")
    async with engine.begin() as conn:
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
async def broadcaster():
    return AuditEventBroadcaster()


@pytest_asyncio.fixture
async def client(db_session, broadcaster):
    from httpx import ASGITransport
    from authtrail.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_unit_of_work():
        yield SqlAlchemyUnitOfWork(db_session)

    # Audit writes share the test session so SQLite never sees two writers
    @asynccontextmanager
    async def session_unit_of_work():
        async with SqlAlchemyUnitOfWork(db_session) as uow:
            yield uow

    def override_get_audit_recorder():
        return AuditRecorder(session_unit_of_work, broadcaster=broadcaster)

    app.dependency_overrides[get_unit_of_work] = override_get_unit_of_work
    app.dependency_overrides[get_audit_recorder] = override_get_audit_recorder
    app.dependency_overrides[get_audit_broadcaster] = lambda: broadcaster

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def register_user(client, db_session):
    """Register through the API and mark the account verified in the database"""

    async def _register(
        email: str = "alice@example.com",
        password: str = "SecurePass123!",
        role: str = None,
        verified: bool = True,
    ) -> User:
        response = await client.post(
            "/auth/register",
            json={
                "first_name": "Alice",
                "last_name": "Example",
                "email": email,
                "password": password,
            },
        )
        assert response.status_code == 201

        user = await get_user(db_session, email)
        user.is_verified = verified
        if role:
            user.role = role
        db_session.add(user)
        await db_session.commit()
        return user

    return _register


@pytest_asyncio.fixture
async def login(client):
    """Log in and return the bearer headers"""

    async def _login(email: str = "alice@example.com", password: str = "SecurePass123!"):
        response = await client.post(
            "/auth/login", json={"email": email, "password": password}
        )
        assert response.status_code == 200
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _login
