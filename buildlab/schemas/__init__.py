"""Pydantic schemas and value objects."""

from .generation import (
    BundleStatus,
    DocumentPreviews,
    FocusArea,
    GeneratedDocumentBundle,
    GeneratedProjectSummary,
    GenerateRequestBody,
    GenerateResponse,
    GenerationOptions,
    GenerationRequest,
    GenerationSection,
    ProjectContext,
    ProjectRead,
    PublishArtifact,
    PublishOutcome,
)
from .github import GitHubRepository
from .payments import CheckoutCompleted

__all__ = [
    "BundleStatus",
    "CheckoutCompleted",
    "DocumentPreviews",
    "FocusArea",
    "GeneratedDocumentBundle",
    "GeneratedProjectSummary",
    "GenerateRequestBody",
    "GenerateResponse",
    "GenerationOptions",
    "GenerationRequest",
    "GenerationSection",
    "GitHubRepository",
    "ProjectContext",
    "ProjectRead",
    "PublishArtifact",
    "PublishOutcome",
]
