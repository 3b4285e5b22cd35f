"""User account connections to external services."""

from .github_connection import (
    complete_authorization,
    connected_page,
    disconnect,
    failed_page,
    start_authorization,
)

__all__ = [
    "complete_authorization",
    "connected_page",
    "disconnect",
    "failed_page",
    "start_authorization",
]
