"""Generation trigger router."""

from fastapi import APIRouter, Depends
import structlog

from ...clients.auth import AuthenticatedUser
from ...config import Settings, get_settings
from ...errors import BuildLabError, GenerationError
from ...generation.orchestrator import GenerationOrchestrator
from ...schemas.generation import (
    DocumentPreviews,
    GeneratedDocumentBundle,
    GeneratedProjectSummary,
    GenerateRequestBody,
    GenerateResponse,
    GenerationOptions,
    GenerationRequest,
)
from ..dependencies import get_current_user, get_orchestrator

logger = structlog.get_logger()

router = APIRouter(tags=["generation"])


def _preview(text: str, limit: int) -> str:
    return text[:limit] + "..."


def summarize(bundle: GeneratedDocumentBundle, preview_chars: int) -> GeneratedProjectSummary:
    return GeneratedProjectSummary(
        preview_url=bundle.preview_url,
        github_url=bundle.github_url,
        documents=DocumentPreviews(
            market_research=_preview(bundle.market_research, preview_chars),
            project_charter=_preview(bundle.project_charter, preview_chars),
            prd=_preview(bundle.prd, preview_chars),
            tech_spec=_preview(bundle.tech_spec, preview_chars),
        ),
    )


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    body: GenerateRequestBody,
    user: AuthenticatedUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    orchestrator: GenerationOrchestrator = Depends(get_orchestrator),
) -> GenerateResponse:
    """Run the selected agents for a build request and return document previews.

    Blocks until the run finishes; clients may also poll ``GET /projects/{slug}``.
    """
    request = GenerationRequest(
        build_request_id=body.build_request_id,
        user_id=user.id,
        options=body.options or GenerationOptions(),
    )
    logger.info(
        "generation_requested",
        build_request_id=request.build_request_id,
        user_id=request.user_id,
    )

    try:
        result = await orchestrator.generate(request.build_request_id, request.options)
    except BuildLabError:
        raise
    except Exception as e:
        logger.error(
            "generation_request_failed",
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        raise GenerationError(str(e) or "Unknown error") from e

    return GenerateResponse(
        success=True,
        project=summarize(result.bundle, settings.document_preview_chars),
    )
