"""Exception taxonomy for the generation service.

Document-stage errors (``GenerationError`` and subclasses) are terminal for a
generation run. ``PublishError`` never escapes a publisher call made by the
orchestrator; it is turned into a ``PublishOutcome``.
"""


class BuildLabError(Exception):
    """Base class for service errors."""

    pass


class AuthenticationError(BuildLabError):
    """Raised when the bearer credential is missing or rejected."""

    pass


class BuildRequestNotFoundError(BuildLabError):
    """Raised when the build request to generate from does not exist."""

    def __init__(self, build_request_id: str):
        super().__init__("Build request not found")
        self.build_request_id = build_request_id


class GenerationInProgressError(BuildLabError):
    """Raised when a generation for the same project slug is already running."""

    def __init__(self, project_slug: str):
        super().__init__(f"Generation already in progress for '{project_slug}'")
        self.project_slug = project_slug


class GenerationError(BuildLabError):
    """Raised when a document-generation stage fails."""

    def __init__(self, message: str, stage: str | None = None):
        super().__init__(message)
        self.stage = stage


class LLMInvocationError(GenerationError):
    """Raised when the model provider call fails."""

    pass


class LLMResponseParseError(GenerationError):
    """Raised when structured output was requested but the reply is not a JSON object."""

    pass


class PublishError(BuildLabError):
    """Raised when publishing generated files to an external host fails."""

    pass


class WebhookError(BuildLabError):
    """Raised for an unusable payment webhook payload."""

    pass


class OAuthError(BuildLabError):
    """Raised when connecting a GitHub account fails."""

    pass
