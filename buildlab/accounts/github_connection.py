"""Connecting a user's GitHub account.

    authorize ─> GitHub consent page ─> callback(code, state) ─> token on the profile

The authorize step issues a single-use state tied to the user. The callback
only trusts the user id stored with that state, never anything in the query.
The stored token is what repository publishing prefers over the service token.
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
import html
import json
import re
import uuid

import httpx
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ..clients.github import GitHubClient
from ..clients.github_oauth import GitHubOAuthClient
from ..errors import OAuthError
from ..models import GitHubOAuthState, Profile

logger = structlog.get_logger()

DEFAULT_STATE_TTL = timedelta(minutes=10)

_UNSAFE_USERNAME_CHARS = re.compile(r"[<>\"'&]")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    return value if value.tzinfo else value.replace(tzinfo=UTC)


async def start_authorization(
    session: AsyncSession,
    oauth: GitHubOAuthClient,
    user_id: str,
    scope: str = "repo",
    redirect_uri: str = "",
    ttl: timedelta = DEFAULT_STATE_TTL,
) -> str:
    """Store a fresh state for ``user_id`` and return GitHub's consent URL.

    Raises:
        OAuthError: The OAuth app is not configured.
    """
    if not oauth.configured:
        raise OAuthError("GitHub connection is not configured")

    state = uuid.uuid4().hex
    session.add(GitHubOAuthState(state=state, user_id=user_id, expires_at=_utcnow() + ttl))
    await session.commit()

    logger.info("github_oauth_started", user_id=user_id)
    return oauth.authorize_url(state, scope=scope, redirect_uri=redirect_uri)


async def complete_authorization(
    session: AsyncSession,
    oauth: GitHubOAuthClient,
    state: str,
    code: str,
    client_factory: Callable[[str], GitHubClient] = GitHubClient,
) -> str:
    """Exchange ``code``, store the token on the state's profile, return the GitHub login.

    Raises:
        OAuthError: Unknown or expired state, rejected code, or missing profile.
    """
    oauth_state = await session.get(GitHubOAuthState, state)
    if oauth_state is None:
        raise OAuthError("Invalid or expired state")

    if _as_utc(oauth_state.expires_at) < _utcnow():
        await session.delete(oauth_state)
        await session.commit()
        raise OAuthError("State expired")

    token = await oauth.exchange_code(code)
    try:
        github_user = await client_factory(token).get_authenticated_user()
    except httpx.HTTPError as e:
        logger.warning("github_user_lookup_failed", error=str(e))
        raise OAuthError("Could not read the GitHub account") from e

    profile = await session.get(Profile, oauth_state.user_id)
    if profile is None:
        raise OAuthError(f"Profile not found: {oauth_state.user_id}")

    profile.github_access_token = token
    profile.github_username = github_user.login
    profile.github_connected_at = _utcnow()
    await session.delete(oauth_state)
    await session.commit()

    logger.info("github_connected", user_id=profile.id, github_username=github_user.login)
    return github_user.login


async def disconnect(session: AsyncSession, user_id: str) -> None:
    """Forget the user's GitHub token; later publishing falls back to the service token."""
    profile = await session.get(Profile, user_id)
    if profile is None:
        return

    profile.github_access_token = None
    profile.github_username = None
    profile.github_connected_at = None
    await session.commit()
    logger.info("github_disconnected", user_id=user_id)


def connected_page(username: str, frontend_url: str) -> str:
    """Popup page that tells the opener which account was connected, then closes."""
    safe_username = _UNSAFE_USERNAME_CHARS.sub("", username)
    message = json.dumps({"type": "github-connected", "username": safe_username})
    return f"""<!DOCTYPE html>
<html>
<head><title>GitHub Connected</title></head>
<body style="font-family: system-ui; text-align: center; padding: 50px;">
  <h1>GitHub Connected!</h1>
  <p>Connected as <strong>@{safe_username}</strong></p>
  <p>You can close this window.</p>
  <script>
    if (window.opener) {{
      window.opener.postMessage({message}, {json.dumps(frontend_url)});
      setTimeout(() => window.close(), 2000);
    }}
  </script>
</body>
</html>
"""


def failed_page(error: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<head><title>GitHub Connection Failed</title></head>
<body style="font-family: system-ui; text-align: center; padding: 50px;">
  <h1>GitHub Connection Failed</h1>
  <p>{html.escape(error)}</p>
  <script>window.close();</script>
</body>
</html>
"""
