"""Tests for agent prompts and focus modifiers."""

import pytest

from buildlab.agents.prompts import (
    AGENT_PROMPTS,
    FOCUS_MODIFIERS,
    AgentRole,
    get_focus_modifier,
    get_system_prompt,
)
from buildlab.schemas.generation import FocusArea


class TestSystemPrompts:
    def test_every_role_has_a_prompt(self):
        assert set(AGENT_PROMPTS) == set(AgentRole)
        assert all(prompt.strip() for prompt in AGENT_PROMPTS.values())

    def test_lookup_by_role_name(self):
        assert get_system_prompt("research") == get_system_prompt(AgentRole.RESEARCH)

    def test_unknown_role_raises(self):
        with pytest.raises(ValueError):
            get_system_prompt("designer")

    def test_coder_prompt_asks_for_json_file_map(self):
        prompt = get_system_prompt(AgentRole.CODER)
        assert "JSON object" in prompt
        assert "src/App.tsx" in prompt

    def test_prompts_are_distinct(self):
        assert len(set(AGENT_PROMPTS.values())) == len(AgentRole)


class TestFocusModifiers:
    def test_balanced_is_empty(self):
        assert get_focus_modifier(FocusArea.BALANCED) == ""

    def test_every_other_focus_has_text(self):
        for focus, text in FOCUS_MODIFIERS.items():
            if focus is not FocusArea.BALANCED:
                assert text, focus

    def test_lookup_by_value(self):
        assert "cost-efficiency" in get_focus_modifier("budget")
        assert "enterprise-grade" in get_focus_modifier("enterprise")

    @pytest.mark.parametrize("focus", [None, "", "cheap", "BUDGET"])
    def test_unknown_focus_is_empty(self, focus):
        assert get_focus_modifier(focus) == ""
