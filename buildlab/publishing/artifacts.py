"""Per-file publish artifacts and content-type lookup."""

from collections.abc import Mapping
import posixpath

from ..schemas.generation import PublishArtifact

DEFAULT_CONTENT_TYPE = "text/plain"

CONTENT_TYPES: dict[str, str] = {
    ".html": "text/html",
    ".css": "text/css",
    ".js": "application/javascript",
    ".json": "application/json",
    ".ts": "application/typescript",
    ".tsx": "application/typescript",
    ".svg": "image/svg+xml",
    ".png": "image/png",
    ".ico": "image/x-icon",
}


def content_type_for(path: str) -> str:
    """Content type derived from the file extension."""
    _, ext = posixpath.splitext(path)
    return CONTENT_TYPES.get(ext.lower(), DEFAULT_CONTENT_TYPE)


def build_artifacts(files: Mapping[str, str]) -> list[PublishArtifact]:
    """One artifact per generated file, paths normalised to be relative."""
    return [
        PublishArtifact(
            path=path.lstrip("/"),
            content=content,
            content_type=content_type_for(path),
        )
        for path, content in files.items()
    ]
