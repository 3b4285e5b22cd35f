"""Publishes generated files to a new source repository."""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

import httpx
import structlog

from ..clients.github import GitHubClient
from ..errors import PublishError
from .artifacts import build_artifacts

logger = structlog.get_logger()

GitHubClientFactory = Callable[[str], GitHubClient]


@dataclass(frozen=True)
class RepositoryPublishResult:
    repo_url: str
    uploaded: int
    total: int

    @property
    def summary(self) -> str:
        return f"{self.uploaded} of {self.total} files uploaded"


class SourceRepositoryPublisher:
    """Creates ``{prefix}-{slug}`` and commits each generated file to it."""

    def __init__(
        self,
        client_factory: GitHubClientFactory = GitHubClient,
        repo_prefix: str = "buildlab",
        private: bool = False,
        init_delay_seconds: float = 2.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.client_factory = client_factory
        self.repo_prefix = repo_prefix
        self.private = private
        self.init_delay_seconds = init_delay_seconds
        self._sleep = sleep

    def repo_name(self, slug: str) -> str:
        return f"{self.repo_prefix}-{slug}"

    async def publish(
        self,
        credential: str,
        slug: str,
        files: Mapping[str, str],
        description: str,
    ) -> RepositoryPublishResult:
        """Create the repository, then upload files one commit each.

        Raises:
            PublishError: If the repository itself cannot be created.
        """
        client = self.client_factory(credential)
        name = self.repo_name(slug)

        try:
            repo = await client.create_user_repo(
                name=name,
                description=f"{description} - Generated by BuildLab",
                private=self.private,
                auto_init=True,
            )
        except httpx.HTTPError as e:
            logger.error("github_repo_creation_failed", name=name, error=str(e))
            raise PublishError("Failed to create GitHub repository") from e

        # Host-side initialisation of the auto-created default branch
        if self.init_delay_seconds > 0:
            await self._sleep(self.init_delay_seconds)

        artifacts = build_artifacts(files)
        uploaded = 0
        for artifact in artifacts:
            try:
                await client.put_file(
                    repo.full_name,
                    artifact.path,
                    artifact.content,
                    message=f"Add {artifact.path}",
                )
                uploaded += 1
            except httpx.HTTPError as e:
                logger.warning(
                    "github_file_upload_failed",
                    repo=repo.full_name,
                    path=artifact.path,
                    error=str(e),
                )

        result = RepositoryPublishResult(
            repo_url=repo.html_url, uploaded=uploaded, total=len(artifacts)
        )
        logger.info(
            "github_publish_complete",
            repo_url=result.repo_url,
            uploaded=result.uploaded,
            total=result.total,
            summary=result.summary,
        )
        return result
