from .config import get_logger, redact_secrets, setup_logging
from .correlation import bind_generation_context, clear_context, set_correlation_id

__all__ = [
    "setup_logging",
    "get_logger",
    "redact_secrets",
    "set_correlation_id",
    "clear_context",
    "bind_generation_context",
]
