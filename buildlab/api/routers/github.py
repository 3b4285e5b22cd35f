"""GitHub account connection router."""

from datetime import timedelta
from functools import partial

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from ...accounts import (
    complete_authorization,
    connected_page,
    disconnect,
    failed_page,
    start_authorization,
)
from ...clients.auth import AuthenticatedUser
from ...clients.github import GitHubClient
from ...clients.github_oauth import GitHubOAuthClient
from ...config import Settings, get_settings
from ...errors import OAuthError
from ..database import get_async_session
from ..dependencies import get_current_user, get_github_oauth_client

router = APIRouter(prefix="/github/oauth", tags=["github"])


@router.get("/authorize")
async def authorize(
    user: AuthenticatedUser = Depends(get_current_user),
    settings: Settings = Depends(get_settings),
    oauth: GitHubOAuthClient = Depends(get_github_oauth_client),
    db: AsyncSession = Depends(get_async_session),
) -> dict:
    """Return the GitHub consent URL the frontend opens in a popup."""
    url = await start_authorization(
        db,
        oauth,
        user.id,
        scope=settings.github_oauth_scope,
        redirect_uri=settings.github_oauth_redirect_uri,
        ttl=timedelta(seconds=settings.github_oauth_state_ttl_seconds),
    )
    return {"url": url}


@router.get("/callback", response_class=HTMLResponse)
async def callback(
    code: str | None = None,
    state: str | None = None,
    error: str | None = None,
    settings: Settings = Depends(get_settings),
    oauth: GitHubOAuthClient = Depends(get_github_oauth_client),
    db: AsyncSession = Depends(get_async_session),
) -> HTMLResponse:
    """GitHub redirects the popup here after the consent page."""
    if error:
        return HTMLResponse(failed_page(error))
    if not code or not state:
        raise OAuthError("Missing code or state")

    username = await complete_authorization(
        db,
        oauth,
        state,
        code,
        client_factory=partial(GitHubClient, api_url=settings.github_api_url),
    )
    return HTMLResponse(connected_page(username, settings.frontend_url))


@router.post("/disconnect")
async def disconnect_github(
    user: AuthenticatedUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> dict:
    await disconnect(db, user.id)
    return {"success": True}
