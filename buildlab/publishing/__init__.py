"""Publishers for generated code files."""

from .artifacts import CONTENT_TYPES, DEFAULT_CONTENT_TYPE, build_artifacts, content_type_for
from .object_storage import ObjectStoragePublisher
from .source_repository import RepositoryPublishResult, SourceRepositoryPublisher

__all__ = [
    "CONTENT_TYPES",
    "DEFAULT_CONTENT_TYPE",
    "ObjectStoragePublisher",
    "RepositoryPublishResult",
    "SourceRepositoryPublisher",
    "build_artifacts",
    "content_type_for",
]
