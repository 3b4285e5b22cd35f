"""Persistence collaborator for generation runs.

The orchestrator talks to the ``GenerationStore`` protocol; the SQLAlchemy
implementation writes the ``build_requests`` and ``generated_projects``
tables with upsert-by-slug semantics.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import structlog

from ..errors import BuildRequestNotFoundError
from ..models import BuildRequest, GeneratedProject, GenerationStatus
from ..schemas.generation import BundleStatus, GeneratedDocumentBundle, ProjectContext

logger = structlog.get_logger()


@dataclass(frozen=True)
class BuildRequestRecord:
    """Source proposal as loaded for one generation run."""

    id: str
    user_id: str
    title: str
    category: str = ""
    short_description: str = ""
    detailed_description: str = ""
    target_audience: str | None = None
    features: tuple[str, ...] = field(default_factory=tuple)
    creator_username: str | None = None
    github_access_token: str | None = None

    def to_context(self) -> ProjectContext:
        return ProjectContext(
            build_request_id=self.id,
            title=self.title,
            category=self.category,
            description=self.detailed_description,
            short_description=self.short_description,
            target_audience=self.target_audience,
            features=self.features,
            creator=self.creator_username,
        )


class GenerationStore(Protocol):
    async def load_build_request(self, build_request_id: str) -> BuildRequestRecord: ...

    async def load_bundle(self, project_slug: str) -> GeneratedDocumentBundle | None: ...

    async def mark_processing(self, record: BuildRequestRecord, project_slug: str) -> None: ...

    async def mark_failed(
        self, record: BuildRequestRecord, project_slug: str, error: str
    ) -> None: ...

    async def save_bundle(self, bundle: GeneratedDocumentBundle) -> None: ...


def _features(raw: object) -> tuple[str, ...]:
    if isinstance(raw, list | tuple):
        return tuple(str(f) for f in raw if f)
    return ()


class SqlAlchemyGenerationStore:
    """GenerationStore backed by the relational database."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def load_build_request(self, build_request_id: str) -> BuildRequestRecord:
        async with self.session_maker() as session:
            build_request = await session.get(BuildRequest, build_request_id)
            if build_request is None:
                raise BuildRequestNotFoundError(build_request_id)

            profile = build_request.profile
            return BuildRequestRecord(
                id=build_request.id,
                user_id=build_request.user_id,
                title=build_request.title,
                category=build_request.category or "",
                short_description=build_request.short_description or "",
                detailed_description=build_request.detailed_description or "",
                target_audience=build_request.target_audience,
                features=_features(build_request.features),
                creator_username=profile.username if profile else None,
                github_access_token=profile.github_access_token if profile else None,
            )

    async def load_bundle(self, project_slug: str) -> GeneratedDocumentBundle | None:
        async with self.session_maker() as session:
            project = await self._get_project(session, project_slug)
            if project is None:
                return None
            return GeneratedDocumentBundle.model_validate(project)

    async def mark_processing(self, record: BuildRequestRecord, project_slug: str) -> None:
        async with self.session_maker() as session:
            await self._set_request_status(session, record.id, GenerationStatus.PROCESSING)

            project = await self._get_project(session, project_slug)
            if project is None:
                project = GeneratedProject(project_slug=project_slug)
                session.add(project)
            project.build_request_id = record.id
            project.user_id = record.user_id
            project.status = BundleStatus.PROCESSING.value
            project.error = None

            await session.commit()

        logger.info("generation_status_recorded", status=BundleStatus.PROCESSING.value)

    async def mark_failed(self, record: BuildRequestRecord, project_slug: str, error: str) -> None:
        async with self.session_maker() as session:
            await self._set_request_status(session, record.id, GenerationStatus.FAILED)

            project = await self._get_project(session, project_slug)
            if project is not None:
                project.status = BundleStatus.FAILED.value
                project.error = error

            await session.commit()

        logger.info("generation_status_recorded", status=BundleStatus.FAILED.value)

    async def save_bundle(self, bundle: GeneratedDocumentBundle) -> None:
        async with self.session_maker() as session:
            project = await self._get_project(session, bundle.project_slug)
            if project is None:
                project = GeneratedProject(project_slug=bundle.project_slug)
                session.add(project)

            project.build_request_id = bundle.build_request_id
            project.user_id = bundle.user_id
            project.market_research = bundle.market_research
            project.project_charter = bundle.project_charter
            project.prd = bundle.prd
            project.tech_spec = bundle.tech_spec
            project.code_files = dict(bundle.code_files)
            project.preview_url = bundle.preview_url
            project.github_url = bundle.github_url
            project.status = bundle.status.value
            project.error = bundle.error
            project.generated_at = datetime.now(UTC)

            build_request = await session.get(BuildRequest, bundle.build_request_id)
            if build_request is not None:
                build_request.generation_status = bundle.status.value
                build_request.preview_url = bundle.preview_url
                build_request.github_url = bundle.github_url

            await session.commit()

        logger.info(
            "generation_status_recorded",
            status=bundle.status.value,
            code_file_count=len(bundle.code_files),
        )

    @staticmethod
    async def _get_project(session: AsyncSession, project_slug: str) -> GeneratedProject | None:
        result = await session.execute(
            select(GeneratedProject).where(GeneratedProject.project_slug == project_slug)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def _set_request_status(
        session: AsyncSession, build_request_id: str, status: GenerationStatus
    ) -> None:
        build_request = await session.get(BuildRequest, build_request_id)
        if build_request is not None:
            build_request.generation_status = status.value
