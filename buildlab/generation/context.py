"""Project context assembly for agent prompts."""

from ..agents.prompts import get_focus_modifier
from ..schemas.generation import GenerationOptions, ProjectContext

DEFAULT_TARGET_AUDIENCE = "General users"
DEFAULT_FEATURES = "Standard web application features"

CODE_BUILD_INSTRUCTIONS = """Generate a complete, working React application based on these specifications.
Make it visually impressive with a modern dark theme, animations, and professional UI.
Include realistic mock data and full interactivity."""


def render_context(context: ProjectContext, options: GenerationOptions) -> str:
    """Base prompt text shared by every agent of one generation run."""
    features = ", ".join(context.features) or DEFAULT_FEATURES
    lines = [
        f"Project Title: {context.title}",
        f"Category: {context.category}",
        f"Description: {context.description}",
        f"Short Description: {context.short_description}",
        f"Target Audience: {context.target_audience or DEFAULT_TARGET_AUDIENCE}",
        f"Key Features Requested: {features}",
        f"Creator: {context.creator or ''}",
    ]
    text = "\n".join(lines)

    focus_modifier = get_focus_modifier(options.focus_area)
    if focus_modifier:
        text += f"\n\nFocus Area: {focus_modifier}"
    if options.custom_instructions.strip():
        text += f"\n\nCustom Instructions from User:\n{options.custom_instructions.strip()}"
    return text.strip()


def excerpt(text: str, limit: int) -> str:
    """First ``limit`` characters of an upstream document."""
    return text[:limit]


def with_upstream(base: str, heading: str, document: str, limit: int) -> str:
    """Append an upstream document excerpt under ``heading`` if there is one."""
    if not document:
        return base
    return f"{base}\n\n{heading}:\n{excerpt(document, limit)}"


def render_code_context(
    base: str,
    prd: str,
    tech_spec: str,
    prd_limit: int,
    tech_spec_limit: int,
) -> str:
    parts = [base]
    if prd:
        parts.append(f"PRD Summary:\n{excerpt(prd, prd_limit)}")
    if tech_spec:
        parts.append(f"Technical Spec:\n{excerpt(tech_spec, tech_spec_limit)}")
    parts.append(CODE_BUILD_INSTRUCTIONS)
    return "\n\n".join(parts)
