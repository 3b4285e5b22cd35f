"""External auth provider client.

Sessions live with the auth provider; this service only resolves a bearer
token to a user id.
"""

from dataclasses import dataclass

import httpx
import structlog

from ..errors import AuthenticationError

logger = structlog.get_logger()


@dataclass(frozen=True)
class AuthenticatedUser:
    id: str
    email: str | None = None


class AuthClient:
    """Resolves access tokens through the provider's user endpoint."""

    def __init__(self, base_url: str, api_key: str = "", timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout

    async def get_user(self, token: str) -> AuthenticatedUser:
        """Return the user owning ``token``.

        Raises:
            AuthenticationError: If the token is rejected or cannot be checked.
        """
        if not token:
            raise AuthenticationError("Missing authorization header")
        if not self.base_url:
            raise AuthenticationError("Auth provider is not configured")

        headers = {"Authorization": f"Bearer {token}"}
        if self.api_key:
            headers["apikey"] = self.api_key

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(f"{self.base_url}/auth/v1/user", headers=headers)
        except httpx.HTTPError as e:
            logger.warning("auth_provider_unreachable", error=str(e))
            raise AuthenticationError("Could not verify token") from e

        if resp.status_code != httpx.codes.OK:
            logger.info("auth_token_rejected", status_code=resp.status_code)
            raise AuthenticationError("Invalid or expired token")

        data = resp.json()
        user_id = data.get("id")
        if not user_id:
            raise AuthenticationError("Invalid or expired token")
        return AuthenticatedUser(id=str(user_id), email=data.get("email"))
