"""Tests for the source-repository publisher."""

import json

import httpx
import pytest
import respx

from buildlab.errors import PublishError
from buildlab.publishing.source_repository import SourceRepositoryPublisher
from tests.fakes import SAMPLE_CODE_FILES

REPO = {
    "id": 7,
    "name": "buildlab-ai-recipe-finder",
    "full_name": "chef/buildlab-ai-recipe-finder",
    "html_url": "https://github.com/chef/buildlab-ai-recipe-finder",
}


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def mock_contents(respx_mock) -> dict:
    """One contents route per sample file, each answering 201."""
    return {
        path: respx_mock.put(f"/repos/chef/buildlab-ai-recipe-finder/contents/{path}").mock(
            return_value=httpx.Response(httpx.codes.CREATED, json={"content": {}})
        )
        for path in SAMPLE_CODE_FILES
    }


@pytest.fixture
def sleep():
    return RecordingSleep()


@pytest.fixture
def publisher(sleep):
    return SourceRepositoryPublisher(sleep=sleep)


class TestSourceRepositoryPublisher:
    def test_repo_name_uses_prefix(self):
        assert SourceRepositoryPublisher(repo_prefix="lab").repo_name("demo") == "lab-demo"

    @pytest.mark.asyncio
    async def test_creates_repo_and_commits_each_file(self, publisher, sleep):
        async with respx.mock(base_url="https://api.github.com") as respx_mock:
            create = respx_mock.post("/user/repos").mock(
                return_value=httpx.Response(httpx.codes.CREATED, json=REPO)
            )
            puts = mock_contents(respx_mock)

            result = await publisher.publish(
                "gho_user_token", "ai-recipe-finder", SAMPLE_CODE_FILES, "Recipes from your fridge"
            )

        assert result.repo_url == "https://github.com/chef/buildlab-ai-recipe-finder"
        assert result.uploaded == result.total == len(SAMPLE_CODE_FILES)
        assert result.summary == "5 of 5 files uploaded"

        body = json.loads(create.calls.last.request.content)
        assert body["name"] == "buildlab-ai-recipe-finder"
        assert body["description"] == "Recipes from your fridge - Generated by BuildLab"
        assert body["auto_init"] is True
        assert create.calls.last.request.headers["Authorization"] == "Bearer gho_user_token"

        assert all(route.call_count == 1 for route in puts.values())
        body = json.loads(puts["src/App.tsx"].calls.last.request.content)
        assert body["message"] == "Add src/App.tsx"
        assert sleep.delays == [2.0]

    @pytest.mark.asyncio
    async def test_individual_file_failure_is_counted(self, publisher):
        async with respx.mock(base_url="https://api.github.com") as respx_mock:
            respx_mock.post("/user/repos").mock(
                return_value=httpx.Response(httpx.codes.CREATED, json=REPO)
            )
            puts = mock_contents(respx_mock)
            puts["package.json"].mock(
                return_value=httpx.Response(httpx.codes.CONFLICT, json={"message": "sha required"})
            )

            result = await publisher.publish("token", "ai-recipe-finder", SAMPLE_CODE_FILES, "d")

        assert result.uploaded == len(SAMPLE_CODE_FILES) - 1
        assert result.total == len(SAMPLE_CODE_FILES)
        assert result.summary == "4 of 5 files uploaded"

    @pytest.mark.asyncio
    async def test_repo_creation_failure_raises(self, publisher):
        async with respx.mock(base_url="https://api.github.com") as respx_mock:
            respx_mock.post("/user/repos").mock(
                return_value=httpx.Response(httpx.codes.UNAUTHORIZED, json={"message": "Bad credentials"})
            )

            with pytest.raises(PublishError, match="Failed to create GitHub repository"):
                await publisher.publish("bad", "ai-recipe-finder", SAMPLE_CODE_FILES, "d")

    @pytest.mark.asyncio
    async def test_zero_delay_skips_sleep(self, sleep):
        publisher = SourceRepositoryPublisher(init_delay_seconds=0, sleep=sleep)
        async with respx.mock(base_url="https://api.github.com") as respx_mock:
            respx_mock.post("/user/repos").mock(
                return_value=httpx.Response(httpx.codes.CREATED, json=REPO)
            )
            result = await publisher.publish("token", "ai-recipe-finder", {}, "d")

        assert sleep.delays == []
        assert result.total == 0
