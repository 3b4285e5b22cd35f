"""Generated project (document bundle) model."""

from datetime import datetime

from sqlalchemy import JSON, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, new_id


class GeneratedProject(Base):
    """One row per project slug; overwritten by each new generation."""

    __tablename__ = "generated_projects"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    project_slug: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    build_request_id: Mapped[str] = mapped_column(String(64), ForeignKey("build_requests.id"))
    user_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    market_research: Mapped[str] = mapped_column(Text, default="")
    project_charter: Mapped[str] = mapped_column(Text, default="")
    prd: Mapped[str] = mapped_column(Text, default="")
    tech_spec: Mapped[str] = mapped_column(Text, default="")
    code_files: Mapped[dict] = mapped_column(JSON, default=dict)

    preview_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    github_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    status: Mapped[str] = mapped_column(String(50), default="pending")
    error: Mapped[str | None] = mapped_column(Text, nullable=True)
    generated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
