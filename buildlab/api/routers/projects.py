"""Generated projects router: polling and live preview."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from ...models import BuildRequest, GeneratedProject
from ...preview import content_security_policy, render_preview
from ...schemas.generation import ProjectRead
from ..database import get_async_session

logger = structlog.get_logger()

router = APIRouter(prefix="/projects", tags=["projects"])


async def _get_project(db: AsyncSession, project_slug: str) -> GeneratedProject:
    result = await db.execute(
        select(GeneratedProject).where(GeneratedProject.project_slug == project_slug)
    )
    project = result.scalar_one_or_none()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("/{project_slug}", response_model=ProjectRead)
async def get_project(
    project_slug: str,
    db: AsyncSession = Depends(get_async_session),
) -> GeneratedProject:
    """Get a generated project by slug, including its generation status."""
    return await _get_project(db, project_slug)


@router.get("/{project_slug}/preview", response_class=HTMLResponse)
async def get_project_preview(
    project_slug: str,
    db: AsyncSession = Depends(get_async_session),
) -> HTMLResponse:
    """Render the project's code files as a sandboxed live preview document."""
    project = await _get_project(db, project_slug)

    title = project_slug
    build_request = await db.get(BuildRequest, project.build_request_id)
    if build_request is not None:
        title = build_request.title

    code_files = project.code_files or {}
    logger.info("preview_rendered", project_slug=project_slug, file_count=len(code_files))
    return HTMLResponse(
        content=render_preview(code_files, title),
        headers={"Content-Security-Policy": content_security_policy()},
    )
