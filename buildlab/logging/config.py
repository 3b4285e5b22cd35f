import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict, Processor

# HTTP and SDK loggers that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "botocore", "boto3", "urllib3", "stripe")

# Credentials that pass through generation and webhook handling
SECRET_KEYS = frozenset(
    {
        "authorization",
        "credential",
        "github_access_token",
        "service_github_token",
        "stripe_signature",
        "token",
    }
)
REDACTED = "***"


def redact_secrets(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credential values bound to a log line."""
    for key in SECRET_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def setup_logging(
    service_name: str = "buildlab-generator",
    log_format: Literal["json", "console"] = "console",
    log_level: str = "INFO",
) -> None:
    """Configure structured logging with structlog.

    Args:
        service_name: Name bound to every log line.
        log_format: Output format - "json" for production, "console" for dev.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR). Client
            libraries in ``NOISY_LOGGERS`` only log below WARNING at DEBUG.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(
            numeric_level if numeric_level <= logging.DEBUG else max(numeric_level, logging.WARNING)
        )

    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        # correlation_id, method, path, build_request_id, project_slug
        structlog.contextvars.merge_contextvars,
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer(sort_keys=False))
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=service_name)

    logger = structlog.get_logger()
    logger.info(
        "logging_initialized",
        service=service_name,
        log_format=log_format,
        log_level=log_level,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance."""
    return structlog.get_logger(name)
