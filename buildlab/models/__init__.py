"""Database models package."""

from .base import Base
from .build_request import BuildRequest, GenerationStatus
from .generated_project import GeneratedProject
from .github_oauth_state import GitHubOAuthState
from .profile import Profile
from .transaction import Transaction

__all__ = [
    "Base",
    "BuildRequest",
    "GeneratedProject",
    "GenerationStatus",
    "GitHubOAuthState",
    "Profile",
    "Transaction",
]
