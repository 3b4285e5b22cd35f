"""At-most-one running generation per project slug."""

from collections.abc import Iterator
from contextlib import contextmanager
import uuid

import structlog

from ..errors import GenerationInProgressError

logger = structlog.get_logger()


class InFlightRegistry:
    """Maps a project slug to the token of the generation currently running for it.

    Acquire and release never await, so on a single event loop the
    check-and-set cannot interleave with another request.
    """

    def __init__(self) -> None:
        self._tokens: dict[str, str] = {}

    def is_running(self, project_slug: str) -> bool:
        return project_slug in self._tokens

    def acquire(self, project_slug: str) -> str:
        if project_slug in self._tokens:
            logger.warning("generation_already_running", project_slug=project_slug)
            raise GenerationInProgressError(project_slug)
        token = uuid.uuid4().hex
        self._tokens[project_slug] = token
        return token

    def release(self, project_slug: str, token: str) -> None:
        if self._tokens.get(project_slug) == token:
            del self._tokens[project_slug]

    @contextmanager
    def hold(self, project_slug: str) -> Iterator[str]:
        token = self.acquire(project_slug)
        try:
            yield token
        finally:
            self.release(project_slug, token)
