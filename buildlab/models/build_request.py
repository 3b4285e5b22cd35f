"""Build request (proposal) model."""

from enum import Enum

from sqlalchemy import JSON, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, new_id
from .profile import Profile


class GenerationStatus(str, Enum):
    """Generation progress recorded on the proposal (null until first run)."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class BuildRequest(Base):
    """User-submitted idea that seeds generation."""

    __tablename__ = "build_requests"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), index=True)
    title: Mapped[str] = mapped_column(String(255))
    category: Mapped[str] = mapped_column(String(100), default="")
    short_description: Mapped[str] = mapped_column(String(500), default="")
    detailed_description: Mapped[str] = mapped_column(Text, default="")
    target_audience: Mapped[str | None] = mapped_column(String(500), nullable=True)
    features: Mapped[list] = mapped_column(JSON, default=list)
    status: Mapped[str] = mapped_column(String(50), default="submitted")

    generation_status: Mapped[str | None] = mapped_column(String(50), nullable=True)
    preview_url: Mapped[str | None] = mapped_column(String(512), nullable=True)
    github_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    profile: Mapped[Profile | None] = relationship(lazy="joined")
