"""Role prompts for the generation agents."""

from .prompts import AGENT_PROMPTS, FOCUS_MODIFIERS, AgentRole, get_focus_modifier, get_system_prompt

__all__ = [
    "AGENT_PROMPTS",
    "FOCUS_MODIFIERS",
    "AgentRole",
    "get_focus_modifier",
    "get_system_prompt",
]
