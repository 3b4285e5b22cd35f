import base64

import httpx
import structlog

from ..schemas.github import GitHubRepository, GitHubUser

logger = structlog.get_logger()

DEFAULT_API_URL = "https://api.github.com"


class GitHubClient:
    """Client for GitHub REST calls made with a user or service token."""

    def __init__(self, token: str, api_url: str = DEFAULT_API_URL, timeout: float = 30.0):
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3+json",
            "User-Agent": "BuildLab-Agent",
        }

    async def get_authenticated_user(self) -> GitHubUser:
        """Return the user the token belongs to."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(f"{self.api_url}/user", headers=self._headers)
            resp.raise_for_status()
            return GitHubUser.model_validate(resp.json())

    async def create_user_repo(
        self,
        name: str,
        description: str = "",
        private: bool = False,
        auto_init: bool = True,
    ) -> GitHubRepository:
        """Create a repository owned by the authenticated user."""
        payload = {
            "name": name,
            "description": description,
            "private": private,
            "auto_init": auto_init,
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(
                f"{self.api_url}/user/repos",
                headers=self._headers,
                json=payload,
            )
            resp.raise_for_status()
            data = resp.json()

        logger.info("github_repo_created", name=name, repo_url=data.get("html_url"))
        return GitHubRepository.model_validate(data)

    async def put_file(
        self,
        full_name: str,
        path: str,
        content: str,
        message: str,
        branch: str | None = None,
    ) -> dict:
        """Create a file in the repository as a single commit."""
        payload = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
        }
        if branch:
            payload["branch"] = branch

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.put(
                f"{self.api_url}/repos/{full_name}/contents/{path}",
                headers=self._headers,
                json=payload,
            )
            resp.raise_for_status()
            data = resp.json()

        logger.debug("github_file_created", repo=full_name, path=path)
        return data.get("content") or {}
