"""Shared fixtures for generation tests."""

import pytest
import structlog

from buildlab.generation.inflight import InFlightRegistry
from buildlab.generation.orchestrator import GenerationOrchestrator
from buildlab.generation.store import BuildRequestRecord
from buildlab.publishing.object_storage import ObjectStoragePublisher
from tests.fakes import FakeLLM, FakeObjectStore, FakeRepositoryPublisher, FakeStore


@pytest.fixture(autouse=True)
def clear_log_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def record() -> BuildRequestRecord:
    return BuildRequestRecord(
        id="br-1",
        user_id="user-1",
        title="AI Recipe Finder",
        category="Food",
        short_description="Find recipes from what is in your fridge",
        detailed_description="Snap your fridge, get recipes ranked by what you already have.",
        target_audience="Home cooks",
        features=("Photo ingredient detection", "Recipe ranking"),
        creator_username="chef",
        github_access_token="gho_user_token",
    )


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture
def fake_store(record) -> FakeStore:
    return FakeStore([record])


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def repository_publisher() -> FakeRepositoryPublisher:
    return FakeRepositoryPublisher()


@pytest.fixture
def orchestrator(fake_store, fake_llm, object_store, repository_publisher) -> GenerationOrchestrator:
    return GenerationOrchestrator(
        store=fake_store,
        llm=fake_llm,
        storage_publisher=ObjectStoragePublisher(object_store),
        repository_publisher=repository_publisher,
        registry=InFlightRegistry(),
        service_github_token="ghs_service_token",
    )
