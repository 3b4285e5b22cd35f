"""GitHub OAuth app client.

GitHub OAuth documentation: https://docs.github.com/en/apps/oauth-apps/building-oauth-apps/authorizing-oauth-apps
"""

from urllib.parse import urlencode

import httpx
import structlog

from ..errors import OAuthError

logger = structlog.get_logger()

DEFAULT_OAUTH_URL = "https://github.com"


class GitHubOAuthClient:
    """Builds the consent URL and exchanges authorization codes for user tokens."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        oauth_url: str = DEFAULT_OAUTH_URL,
        timeout: float = 30.0,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.oauth_url = oauth_url.rstrip("/")
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def authorize_url(self, state: str, scope: str = "repo", redirect_uri: str = "") -> str:
        params = {"client_id": self.client_id}
        if redirect_uri:
            params["redirect_uri"] = redirect_uri
        params["scope"] = scope
        params["state"] = state
        return f"{self.oauth_url}/login/oauth/authorize?{urlencode(params)}"

    async def exchange_code(self, code: str) -> str:
        """Trade an authorization code for an access token.

        Raises:
            OAuthError: GitHub rejected the code or could not be reached.
        """
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(
                    f"{self.oauth_url}/login/oauth/access_token",
                    headers={"Accept": "application/json"},
                    json=payload,
                )
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as e:
            logger.warning("github_token_exchange_failed", error=str(e))
            raise OAuthError("Could not reach GitHub") from e

        # GitHub reports a bad code with 200 and an "error" field
        if data.get("error") or not data.get("access_token"):
            logger.warning("github_token_exchange_rejected", error=data.get("error"))
            detail = data.get("error_description") or data.get("error") or "no access token"
            raise OAuthError(f"Token error: {detail}")
        return data["access_token"]
