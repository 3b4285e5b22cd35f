"""FastAPI dependencies: settings, auth and the shared orchestrator."""

from functools import lru_cache, partial

from fastapi import Depends, Header

from ..clients.auth import AuthClient, AuthenticatedUser
from ..clients.github import GitHubClient
from ..clients.github_oauth import GitHubOAuthClient
from ..clients.llm import LLMClient
from ..clients.storage import S3ObjectStore
from ..config import Settings, get_settings
from ..errors import AuthenticationError
from ..generation.inflight import InFlightRegistry
from ..generation.orchestrator import GenerationOrchestrator
from ..generation.store import SqlAlchemyGenerationStore
from ..publishing.object_storage import ObjectStoragePublisher
from ..publishing.source_repository import SourceRepositoryPublisher
from .database import get_session_maker


def get_auth_client(settings: Settings = Depends(get_settings)) -> AuthClient:
    return AuthClient(settings.auth_url, api_key=settings.auth_api_key)


def get_github_oauth_client(settings: Settings = Depends(get_settings)) -> GitHubOAuthClient:
    return GitHubOAuthClient(
        settings.github_client_id,
        settings.github_client_secret,
        oauth_url=settings.github_oauth_url,
    )


async def get_current_user(
    authorization: str | None = Header(None),
    auth_client: AuthClient = Depends(get_auth_client),
) -> AuthenticatedUser:
    """Resolve the bearer token in the Authorization header.

    Raises AuthenticationError (401) if it is missing or rejected.
    """
    if not authorization:
        raise AuthenticationError("Missing authorization header")
    token = authorization.removeprefix("Bearer ").strip()
    return await auth_client.get_user(token)


def build_orchestrator(settings: Settings) -> GenerationOrchestrator:
    """Wire the orchestrator and its collaborators from settings."""
    storage_publisher = None
    if settings.s3_bucket:
        storage_publisher = ObjectStoragePublisher(
            S3ObjectStore(settings.s3_bucket, settings.aws_region),
            scheme=settings.preview_url_scheme,
            cache_control=settings.preview_cache_control,
        )

    repository_publisher = SourceRepositoryPublisher(
        client_factory=partial(GitHubClient, api_url=settings.github_api_url),
        repo_prefix=settings.github_repo_prefix,
        private=settings.github_repo_private,
        init_delay_seconds=settings.github_init_delay_seconds,
    )

    return GenerationOrchestrator(
        store=SqlAlchemyGenerationStore(get_session_maker()),
        llm=LLMClient.from_settings(settings),
        storage_publisher=storage_publisher,
        repository_publisher=repository_publisher,
        registry=InFlightRegistry(),
        service_github_token=settings.github_token,
        slug_max_length=settings.slug_max_length,
        upstream_excerpt_chars=settings.upstream_excerpt_chars,
        prd_excerpt_chars=settings.prd_excerpt_chars,
        tech_spec_excerpt_chars=settings.tech_spec_excerpt_chars,
    )


@lru_cache
def get_orchestrator() -> GenerationOrchestrator:
    """Process-wide orchestrator; its in-flight registry must be shared by all requests."""
    return build_orchestrator(get_settings())
