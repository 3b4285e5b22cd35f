"""Clients for external services."""

from .auth import AuthClient, AuthenticatedUser
from .github import GitHubClient
from .llm import LLMClient, LLMFactory, parse_json_object
from .storage import ObjectStore, S3ObjectStore

__all__ = [
    "AuthClient",
    "AuthenticatedUser",
    "GitHubClient",
    "LLMClient",
    "LLMFactory",
    "ObjectStore",
    "S3ObjectStore",
    "parse_json_object",
]
