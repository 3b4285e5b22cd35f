import structlog


def set_correlation_id(correlation_id: str, **request_fields: str) -> None:
    """Bind the correlation ID, and any request fields, for the current request."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id, **request_fields)


def bind_generation_context(build_request_id: str, project_slug: str) -> None:
    """Tag every log line of the current generation run."""
    structlog.contextvars.bind_contextvars(
        build_request_id=build_request_id, project_slug=project_slug
    )


def clear_context() -> None:
    """Clear all context variables."""
    structlog.contextvars.clear_contextvars()
