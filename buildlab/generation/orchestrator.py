"""Multi-agent generation pipeline.

One ``generate()`` call runs one proposal through the selected agents:

    market research ─┐
                     ├─ (joined) ─> PRD ─> tech spec ─> code prototype ─> publish
    project charter ─┘

Market research and the charter run concurrently; the remaining stages run in
order because each reads the previous stage's output when it exists. Any
document-stage failure is terminal for the run. Publishing is best-effort:
failures end up as ``PublishOutcome`` values and the run still completes.
"""

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
import json
import time
from typing import Any

import structlog

from ..agents.prompts import AgentRole, get_system_prompt
from ..clients.llm import LLMClient
from ..errors import BuildLabError, GenerationError, LLMResponseParseError
from ..logging import bind_generation_context
from ..publishing.object_storage import ObjectStoragePublisher
from ..publishing.source_repository import SourceRepositoryPublisher
from ..schemas.generation import (
    BundleStatus,
    GeneratedDocumentBundle,
    GenerationOptions,
    PublishOutcome,
)
from .context import render_code_context, render_context, with_upstream
from .inflight import InFlightRegistry
from .slug import DEFAULT_SLUG_MAX_LENGTH, make_project_slug
from .store import BuildRequestRecord, GenerationStore

logger = structlog.get_logger()

EXPECTED_CODE_FILES = ("package.json", "index.html", "src/main.tsx", "src/App.tsx")


@dataclass
class DocumentPhaseResult:
    """Outputs of the document-generation phase; empty for stages not run."""

    market_research: str = ""
    project_charter: str = ""
    prd: str = ""
    tech_spec: str = ""
    code_files: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class GenerationResult:
    bundle: GeneratedDocumentBundle
    storage: PublishOutcome | None = None
    repository: PublishOutcome | None = None


def validate_code_files(data: dict[str, Any]) -> dict[str, str]:
    """Check the coder reply maps file paths to file contents.

    JSON files returned as nested objects or arrays are serialised back to text.

    Raises:
        LLMResponseParseError: If a path is blank or a value is neither text nor JSON data.
    """
    # Some models wrap the mapping in a single "files" key
    if set(data) == {"files"} and isinstance(data["files"], dict):
        data = data["files"]

    files: dict[str, str] = {}
    for path, content in data.items():
        if not isinstance(path, str) or not path.strip():
            raise LLMResponseParseError("Code generation returned an empty file path", "code")
        if isinstance(content, (dict, list)):
            content = json.dumps(content, indent=2)
        elif not isinstance(content, str):
            raise LLMResponseParseError(
                f"Code generation returned non-text content for {path}", "code"
            )
        files[path] = content
    return files


class GenerationOrchestrator:
    """Runs agents for a build request and persists the resulting bundle."""

    def __init__(
        self,
        store: GenerationStore,
        llm: LLMClient,
        storage_publisher: ObjectStoragePublisher | None = None,
        repository_publisher: SourceRepositoryPublisher | None = None,
        registry: InFlightRegistry | None = None,
        service_github_token: str = "",
        slug_max_length: int = DEFAULT_SLUG_MAX_LENGTH,
        upstream_excerpt_chars: int = 8000,
        prd_excerpt_chars: int = 2000,
        tech_spec_excerpt_chars: int = 2000,
    ):
        self.store = store
        self.llm = llm
        self.storage_publisher = storage_publisher
        self.repository_publisher = repository_publisher
        self.registry = registry or InFlightRegistry()
        self.service_github_token = service_github_token
        self.slug_max_length = slug_max_length
        self.upstream_excerpt_chars = upstream_excerpt_chars
        self.prd_excerpt_chars = prd_excerpt_chars
        self.tech_spec_excerpt_chars = tech_spec_excerpt_chars

    def project_slug(self, record: BuildRequestRecord) -> str:
        return make_project_slug(record.title, self.slug_max_length) or record.id

    async def generate(
        self, build_request_id: str, options: GenerationOptions | None = None
    ) -> GenerationResult:
        """Run one generation.

        Raises:
            BuildRequestNotFoundError: Before any state change.
            GenerationInProgressError: Another run holds the same slug.
            GenerationError: A document stage or the final save failed; the run is
                recorded as failed.
        """
        options = options or GenerationOptions()
        record = await self.store.load_build_request(build_request_id)
        slug = self.project_slug(record)

        with self.registry.hold(slug):
            bind_generation_context(build_request_id=record.id, project_slug=slug)
            await self.store.mark_processing(record, slug)
            logger.info(
                "generation_started",
                options=options.model_dump(mode="json", by_alias=True),
            )

            context_text = render_context(record.to_context(), options)

            async with self._failure_recorded(record, slug):
                documents = await self._generate_documents(context_text, options)

            storage_outcome: PublishOutcome | None = None
            repository_outcome: PublishOutcome | None = None
            if options.code_prototype and documents.code_files:
                storage_outcome, repository_outcome = await asyncio.gather(
                    self._publish_preview(slug, documents.code_files),
                    self._publish_repository(record, slug, documents.code_files),
                )

            async with self._failure_recorded(record, slug):
                previous = None
                if options.generate_only is not None:
                    previous = await self.store.load_bundle(slug)

                bundle = self._assemble_bundle(
                    record,
                    slug,
                    options,
                    documents,
                    storage_outcome,
                    repository_outcome,
                    previous,
                )
                await self.store.save_bundle(bundle)

            logger.info(
                "generation_complete",
                preview_url=bundle.preview_url,
                github_url=bundle.github_url,
                code_file_count=len(bundle.code_files),
            )
            return GenerationResult(
                bundle=bundle, storage=storage_outcome, repository=repository_outcome
            )

    @asynccontextmanager
    async def _failure_recorded(
        self, record: BuildRequestRecord, slug: str
    ) -> AsyncIterator[None]:
        """Mark the run failed on any error; unknown errors surface as GenerationError."""
        try:
            yield
        except Exception as e:
            message = str(e) or type(e).__name__
            logger.error(
                "generation_failed",
                error=message,
                error_type=type(e).__name__,
                stage=getattr(e, "stage", None),
            )
            try:
                await self.store.mark_failed(record, slug, message)
            except Exception as store_error:
                logger.error(
                    "generation_failure_not_recorded",
                    error=str(store_error),
                    error_type=type(store_error).__name__,
                )
            if isinstance(e, BuildLabError):
                raise
            raise GenerationError(message) from e

    # === Document phase ===

    async def _generate_documents(
        self, context_text: str, options: GenerationOptions
    ) -> DocumentPhaseResult:
        result = DocumentPhaseResult()
        if not options.any_selected:
            logger.info("generation_no_sections_selected")
            return result

        independent: dict[str, Awaitable[str]] = {}
        if options.market_research:
            independent["market_research"] = self._run_stage(
                "market_research", AgentRole.RESEARCH, context_text
            )
        if options.project_charter:
            independent["project_charter"] = self._run_stage(
                "project_charter", AgentRole.PROJECT_CHARTER, context_text
            )

        if independent:
            outputs = await self._gather_all(independent)
            result.market_research = outputs.get("market_research", "")
            result.project_charter = outputs.get("project_charter", "")

        if options.prd:
            prd_context = with_upstream(
                context_text,
                "Market Research",
                result.market_research,
                self.upstream_excerpt_chars,
            )
            result.prd = await self._run_stage("prd", AgentRole.PRODUCT_MANAGER, prd_context)

        if options.tech_spec:
            tech_context = with_upstream(
                context_text, "PRD", result.prd, self.upstream_excerpt_chars
            )
            result.tech_spec = await self._run_stage(
                "tech_spec", AgentRole.ARCHITECT, tech_context
            )

        if options.code_prototype:
            code_context = render_code_context(
                context_text,
                result.prd,
                result.tech_spec,
                self.prd_excerpt_chars,
                self.tech_spec_excerpt_chars,
            )
            result.code_files = await self._run_code_stage(code_context)

        return result

    async def _gather_all(self, stages: dict[str, Awaitable[str]]) -> dict[str, str]:
        """Run stages concurrently; the first failure cancels the rest."""
        tasks = {name: asyncio.ensure_future(coro) for name, coro in stages.items()}
        try:
            await asyncio.gather(*tasks.values())
        except BaseException:
            for task in tasks.values():
                task.cancel()
            await asyncio.gather(*tasks.values(), return_exceptions=True)
            raise
        return {name: task.result() for name, task in tasks.items()}

    async def _run_stage(self, stage: str, role: AgentRole, context_text: str) -> str:
        return await self._timed(
            stage,
            lambda: self.llm.invoke(get_system_prompt(role), context_text),
            context_chars=len(context_text),
        )

    async def _run_code_stage(self, context_text: str) -> dict[str, str]:
        data = await self._timed(
            "code",
            lambda: self.llm.invoke_structured(get_system_prompt(AgentRole.CODER), context_text),
            context_chars=len(context_text),
        )
        files = validate_code_files(data)

        missing = [path for path in EXPECTED_CODE_FILES if path not in files]
        if missing:
            logger.warning("code_generation_missing_files", missing=missing)
        logger.info("code_generation_files", file_count=len(files))
        return files

    async def _timed(self, stage: str, call: Callable[[], Awaitable[Any]], **fields: Any) -> Any:
        logger.info("generation_stage_started", stage=stage, **fields)
        start = time.time()
        try:
            output = await call()
        except GenerationError as e:
            if e.stage is None:
                e.stage = stage
            raise
        duration_ms = (time.time() - start) * 1000
        logger.info(
            "generation_stage_complete",
            stage=stage,
            duration_ms=round(duration_ms, 2),
            chars=len(output) if isinstance(output, str) else None,
        )
        return output

    # === Publishing phase ===

    async def _publish_preview(self, slug: str, files: dict[str, str]) -> PublishOutcome:
        if self.storage_publisher is None:
            return PublishOutcome.failure("Object storage publishing is not configured")
        try:
            url = await self.storage_publisher.publish(slug, files)
        except Exception as e:
            logger.warning("storage_publish_failed", error=str(e), error_type=type(e).__name__)
            return PublishOutcome.failure(str(e) or type(e).__name__)
        return PublishOutcome.success(url)

    async def _publish_repository(
        self, record: BuildRequestRecord, slug: str, files: dict[str, str]
    ) -> PublishOutcome:
        if self.repository_publisher is None:
            return PublishOutcome.failure("Repository publishing is not configured")

        credential = record.github_access_token or self.service_github_token
        if not credential:
            logger.info("github_publish_skipped", reason="no_credential")
            return PublishOutcome.failure("No GitHub credential available")

        try:
            result = await self.repository_publisher.publish(
                credential,
                slug,
                files,
                record.short_description or record.title,
            )
        except Exception as e:
            logger.warning("github_publish_failed", error=str(e), error_type=type(e).__name__)
            return PublishOutcome.failure(str(e) or type(e).__name__)
        return PublishOutcome.success(result.repo_url)

    # === Assembly ===

    @staticmethod
    def _assemble_bundle(
        record: BuildRequestRecord,
        slug: str,
        options: GenerationOptions,
        documents: DocumentPhaseResult,
        storage: PublishOutcome | None,
        repository: PublishOutcome | None,
        previous: GeneratedDocumentBundle | None,
    ) -> GeneratedDocumentBundle:
        bundle = GeneratedDocumentBundle(
            project_slug=slug,
            build_request_id=record.id,
            user_id=record.user_id,
            market_research=documents.market_research,
            project_charter=documents.project_charter,
            prd=documents.prd,
            tech_spec=documents.tech_spec,
            code_files=documents.code_files,
            preview_url=storage.url if storage else None,
            github_url=repository.url if repository else None,
            status=BundleStatus.COMPLETED,
        )

        # Single-section runs keep the sections they did not regenerate
        if previous is not None:
            if not options.market_research:
                bundle.market_research = previous.market_research
            if not options.project_charter:
                bundle.project_charter = previous.project_charter
            if not options.prd:
                bundle.prd = previous.prd
            if not options.tech_spec:
                bundle.tech_spec = previous.tech_spec
            if not options.code_prototype:
                bundle.code_files = previous.code_files
                bundle.preview_url = previous.preview_url
                bundle.github_url = previous.github_url

        return bundle
