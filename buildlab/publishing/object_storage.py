"""Publishes generated files to object storage for static preview hosting."""

from collections.abc import Mapping

import structlog

from ..clients.storage import ObjectStore
from ..errors import PublishError
from .artifacts import build_artifacts

logger = structlog.get_logger()

DEFAULT_CACHE_CONTROL = "public, max-age=3600"


class ObjectStoragePublisher:
    """Uploads every file under ``{slug}/`` and returns the public website URL.

    The first failed upload aborts the whole publish call. The repository
    publisher, by contrast, tolerates individual file failures.
    """

    def __init__(
        self,
        store: ObjectStore,
        scheme: str = "http",
        cache_control: str = DEFAULT_CACHE_CONTROL,
    ):
        self.store = store
        self.scheme = scheme
        self.cache_control = cache_control

    def preview_url(self, slug: str) -> str:
        return (
            f"{self.scheme}://{self.store.bucket}.s3-website-{self.store.region}"
            f".amazonaws.com/{slug}"
        )

    async def publish(self, slug: str, files: Mapping[str, str]) -> str:
        """Upload ``files`` under the slug prefix.

        Raises:
            PublishError: If any single upload fails.
        """
        artifacts = build_artifacts(files)
        logger.info("storage_publish_started", slug=slug, file_count=len(artifacts))

        for artifact in artifacts:
            key = f"{slug}/{artifact.path}"
            try:
                await self.store.put_object(
                    key=key,
                    body=artifact.content,
                    content_type=artifact.content_type,
                    cache_control=self.cache_control,
                )
            except Exception as e:
                logger.error("storage_upload_failed", key=key, error=str(e))
                raise PublishError(f"Failed to upload {artifact.path}: {e}") from e
            logger.debug("storage_object_uploaded", key=key, content_type=artifact.content_type)

        url = self.preview_url(slug)
        logger.info("storage_publish_complete", slug=slug, preview_url=url)
        return url
