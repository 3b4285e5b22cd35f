"""Pydantic schemas for GitHub API responses.

GitHub API Documentation: https://docs.github.com/en/rest
"""

from pydantic import BaseModel, ConfigDict, Field


class GitHubRepository(BaseModel):
    """GitHub repository info.

    Returned from POST /user/repos (create) or GET /repos/{owner}/{repo}.
    """

    model_config = ConfigDict(extra="allow")

    id: int = Field(..., description="Repository ID")
    name: str = Field(..., description="Repository name")
    full_name: str = Field(..., description="Full name: owner/repo")
    private: bool = Field(False, description="Whether repo is private")
    description: str | None = Field(None, description="Repository description")
    html_url: str = Field(..., description="Web URL for the repository")
    default_branch: str = Field("main", description="Default branch name")


class GitHubUser(BaseModel):
    """Authenticated GitHub user.

    Returned from GET /user.
    """

    model_config = ConfigDict(extra="allow")

    id: int = Field(..., description="User ID")
    login: str = Field(..., description="Username")
    name: str | None = Field(None, description="Display name")
