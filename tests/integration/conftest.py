import pytest_asyncio
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession
from audit_trail.adapter.services.unit_of_work import SessionScopedUnitOfWork
from audit_trail.app.audit.event_router import EventRouter
from audit_trail.app.events.event_source import (
    identity_event_source,
    member_event_source,
    user_event_source,
)
from audit_trail.domain.entities import Entity, Member, User, UserGroup


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///./test_audit.db")
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(db_session):
    db_session.add_all(
        [
            User(id=1, name="Admin", email="admin@acme.com", group_aliases=["admin"]),
            User(id=7, name="Jane", email="jane@acme.com", group_aliases=["editors"]),
            Member(id=4, name="Bob", email="bob@acme.com"),
            Member(id=5, name="Ann", email=""),
            UserGroup(
                id=3,
                alias="editors",
                name="Editors",
                allowed_sections=["content", "media"],
                permissions=["F"],
            ),
            Entity(id=10, name="Home"),
        ]
    )
    await db_session.commit()


@pytest_asyncio.fixture
async def uow_factory(session_factory):
    return lambda: SessionScopedUnitOfWork(session_factory)


@pytest_asyncio.fixture
async def audit_router(uow_factory, seeded):
    router = EventRouter(
        identity_events=identity_event_source(),
        user_events=user_event_source(),
        member_events=member_event_source(),
        uow_factory=uow_factory,
    )
    router.register()
    return router


@pytest_asyncio.fixture
async def app(uow_factory, seeded):
    from audit_trail.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig, uow_factory=uow_factory)
    async with app.router.lifespan_context(app):
        yield app


@pytest_asyncio.fixture
async def client(app):
    from httpx import ASGITransport

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
