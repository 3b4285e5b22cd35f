"""Generation pipeline: slug, prompt context, persistence and orchestration."""

from .inflight import InFlightRegistry
from .orchestrator import (
    DocumentPhaseResult,
    GenerationOrchestrator,
    GenerationResult,
    validate_code_files,
)
from .slug import make_project_slug
from .store import BuildRequestRecord, GenerationStore, SqlAlchemyGenerationStore

__all__ = [
    "BuildRequestRecord",
    "DocumentPhaseResult",
    "GenerationOrchestrator",
    "GenerationResult",
    "GenerationStore",
    "InFlightRegistry",
    "SqlAlchemyGenerationStore",
    "make_project_slug",
    "validate_code_files",
]
