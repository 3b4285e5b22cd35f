"""Live preview of generated React code."""

from .renderer import (
    PREVIEW_SANDBOX,
    PreviewModule,
    collect_modules,
    content_security_policy,
    process_stylesheet,
    render_preview,
)
from .transform import clean_for_browser, exported_names

__all__ = [
    "PREVIEW_SANDBOX",
    "PreviewModule",
    "clean_for_browser",
    "collect_modules",
    "content_security_policy",
    "exported_names",
    "process_stylesheet",
    "render_preview",
]
