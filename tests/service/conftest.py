from collections.abc import AsyncGenerator

from httpx import ASGITransport, AsyncClient
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from buildlab.api.database import create_all, get_async_session
from buildlab.api.dependencies import get_current_user, get_orchestrator
from buildlab.api.main import app
from buildlab.clients.auth import AuthenticatedUser
from buildlab.config import Settings, get_settings
from buildlab.generation import GenerationOrchestrator, InFlightRegistry, SqlAlchemyGenerationStore
from buildlab.models import BuildRequest, Profile
from buildlab.publishing import ObjectStoragePublisher
from tests.fakes import FakeLLM, FakeObjectStore, FakeRepositoryPublisher

WEBHOOK_SECRET = "whsec_test_secret"  # noqa: S105


@pytest.fixture
async def db_engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'buildlab.db'}", echo=False)
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture
async def seeded(session_maker):
    """One profile with a connected GitHub account and one submitted proposal."""
    async with session_maker() as session:
        session.add(
            Profile(
                id="user-1",
                username="chef",
                extra_submissions=0,
                github_access_token="gho_user_token",
                github_username="chef",
            )
        )
        session.add(
            BuildRequest(
                id="br-1",
                user_id="user-1",
                title="AI Recipe Finder",
                category="Food",
                short_description="Find recipes from what is in your fridge",
                detailed_description="Snap your fridge, get recipes ranked by what you have.",
                target_audience="Home cooks",
                features=["Photo ingredient detection", "Recipe ranking"],
            )
        )
        await session.commit()


@pytest.fixture
def store(session_maker) -> SqlAlchemyGenerationStore:
    return SqlAlchemyGenerationStore(session_maker)


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def repository_publisher() -> FakeRepositoryPublisher:
    return FakeRepositoryPublisher()


@pytest.fixture
def service_orchestrator(store, fake_llm, object_store, repository_publisher):
    return GenerationOrchestrator(
        store=store,
        llm=fake_llm,
        storage_publisher=ObjectStoragePublisher(object_store),
        repository_publisher=repository_publisher,
        registry=InFlightRegistry(),
        service_github_token="ghs_service_token",
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, stripe_webhook_secret=WEBHOOK_SECRET)


@pytest.fixture
async def client(session_maker, service_orchestrator, settings, seeded):
    """API client wired to the test database and in-process fakes."""

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_orchestrator] = lambda: service_orchestrator
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_current_user] = lambda: AuthenticatedUser(id="user-1")

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
