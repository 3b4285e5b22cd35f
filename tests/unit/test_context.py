"""Tests for prompt context assembly."""

from buildlab.generation.context import (
    CODE_BUILD_INSTRUCTIONS,
    DEFAULT_FEATURES,
    DEFAULT_TARGET_AUDIENCE,
    excerpt,
    render_code_context,
    render_context,
    with_upstream,
)
from buildlab.schemas.generation import FocusArea, GenerationOptions, ProjectContext


def make_context(**overrides) -> ProjectContext:
    fields = {
        "build_request_id": "br-1",
        "title": "AI Recipe Finder",
        "category": "Food",
        "description": "Snap your fridge, get recipes.",
        "short_description": "Recipes from your fridge",
        "target_audience": "Home cooks",
        "features": ("Photo ingredient detection", "Recipe ranking"),
        "creator": "chef",
    }
    fields.update(overrides)
    return ProjectContext(**fields)


class TestRenderContext:
    def test_lists_proposal_fields_in_order(self):
        text = render_context(make_context(), GenerationOptions())
        lines = text.splitlines()
        assert lines[0] == "Project Title: AI Recipe Finder"
        assert lines[1] == "Category: Food"
        assert "Key Features Requested: Photo ingredient detection, Recipe ranking" in lines
        assert lines[-1] == "Creator: chef"

    def test_defaults_for_missing_audience_and_features(self):
        text = render_context(
            make_context(target_audience=None, features=()), GenerationOptions()
        )
        assert f"Target Audience: {DEFAULT_TARGET_AUDIENCE}" in text
        assert f"Key Features Requested: {DEFAULT_FEATURES}" in text

    def test_balanced_focus_adds_nothing(self):
        assert "Focus Area" not in render_context(make_context(), GenerationOptions())

    def test_focus_modifier_appended(self):
        text = render_context(make_context(), GenerationOptions(focus_area=FocusArea.MVP))
        assert "\n\nFocus Area: Keep it minimal" in text

    def test_custom_instructions_appended_trimmed(self):
        text = render_context(
            make_context(), GenerationOptions(custom_instructions="  Target teenagers  ")
        )
        assert text.endswith("Custom Instructions from User:\nTarget teenagers")

    def test_blank_custom_instructions_ignored(self):
        text = render_context(make_context(), GenerationOptions(custom_instructions="   "))
        assert "Custom Instructions" not in text


class TestUpstreamExcerpts:
    def test_excerpt_truncates(self):
        assert excerpt("abcdef", 3) == "abc"

    def test_with_upstream_appends_heading(self):
        assert with_upstream("base", "Market Research", "insights", 100) == (
            "base\n\nMarket Research:\ninsights"
        )

    def test_with_upstream_skips_empty_document(self):
        assert with_upstream("base", "Market Research", "", 100) == "base"

    def test_code_context_includes_summaries_and_instructions(self):
        text = render_code_context("base", "p" * 50, "t" * 50, prd_limit=10, tech_spec_limit=5)
        assert text.startswith("base\n\nPRD Summary:\npppppppppp\n\n")
        assert "Technical Spec:\nttttt\n\n" in text
        assert text.endswith(CODE_BUILD_INSTRUCTIONS)

    def test_code_context_without_upstream(self):
        assert render_code_context("base", "", "", 10, 10) == f"base\n\n{CODE_BUILD_INSTRUCTIONS}"
