"""Pending GitHub OAuth authorization."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class GitHubOAuthState(Base):
    """CSRF state issued by the authorize step; consumed by the callback."""

    __tablename__ = "github_oauth_states"

    state: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), ForeignKey("profiles.id"), index=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))
