"""Tests for the format transformers."""

import pytest
import yaml

from context_sync.formats import (
    FormatFamily,
    derive_description,
    ensure_steps,
    is_verbatim,
    parse_front_matter,
    split_front_matter,
    strip_front_matter,
    to_rule_content,
    to_rule_filename,
    to_skill_content,
    to_skill_path,
    to_workflow_content,
    to_workflow_filename,
    transform_content,
    transform_filename,
    truncate_description,
)


def _front(text: str) -> dict:
    fields, _ = parse_front_matter(text)
    return fields


# ---------------------------------------------------------------------------
# Front matter
# ---------------------------------------------------------------------------


class TestFrontMatter:
    def test_split_leading_block(self):
        front, body = split_front_matter("---\ntitle: x\n---\n# Body\n")
        assert front == "title: x"
        assert body == "# Body\n"

    def test_no_front_matter(self):
        assert split_front_matter("# Just a doc\n") == (None, "# Just a doc\n")

    def test_block_not_at_start_is_body(self):
        text = "# Title\n\n---\nkey: value\n---\n"
        assert strip_front_matter(text) == text

    def test_unclosed_block_is_body(self):
        text = "---\ntitle: x\n# Body\n"
        assert split_front_matter(text) == (None, text)

    def test_bom_and_crlf_normalised(self):
        front, body = split_front_matter("\ufeff---\r\na: 1\r\n---\r\nbody\r\n")
        assert front == "a: 1"
        assert body == "body\n"

    def test_malformed_yaml_yields_empty_fields(self):
        fields, body = parse_front_matter("---\n: [unclosed\n---\nbody")
        assert fields == {}
        assert body == "body"

    def test_non_mapping_yields_empty_fields(self):
        assert _front("---\n- a\n- b\n---\nbody") == {}


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------


class TestDescriptions:
    def test_heading_wins_over_first_line(self):
        assert derive_description("Intro text\n\n# Real Title\n") == "Real Title"

    def test_first_non_empty_line_without_heading(self):
        assert derive_description("\n\n  Do the thing  \nmore") == "Do the thing"

    def test_whitespace_collapsed(self):
        assert derive_description("#   Spaced\tout   title") == "Spaced out title"

    def test_empty_body_uses_default(self):
        assert derive_description("   \n\n") == "Workflow"

    def test_truncate_to_exactly_250(self):
        result = truncate_description("x" * 300)
        assert len(result) == 250
        assert result.endswith("...")
        assert result[:247] == "x" * 247

    def test_short_text_untouched(self):
        assert truncate_description("x" * 250) == "x" * 250


# ---------------------------------------------------------------------------
# Workflow family
# ---------------------------------------------------------------------------


class TestWorkflow:
    @pytest.mark.parametrize(
        "filename, expected",
        [
            ("init-mcp-only.md", "init_mcp_only.md"),
            ("Review-PR.md", "review_pr.md"),
            ("plain.md", "plain.md"),
        ],
    )
    def test_filename(self, filename, expected):
        assert to_workflow_filename(filename) == expected

    def test_prose_wrapped_as_single_step(self):
        assert ensure_steps("First line\nsecond line\n\nthird") == (
            "1. First line\n   second line\n\n   third"
        )

    def test_numbered_body_left_alone(self):
        body = "Intro\n\n1. Do this\n2. Then that"
        assert ensure_steps(body) == body

    def test_empty_body(self):
        assert ensure_steps("  \n") == ""

    def test_content_shape(self):
        out = to_workflow_content("# Deploy app\n\nRun the deploy script.")
        assert out.startswith("---\ndescription: Deploy app\n---\n\n")
        assert out.endswith("\n")
        _, body = split_front_matter(out)
        assert body.strip() == "1. # Deploy app\n\n   Run the deploy script."

    def test_declared_description_wins_over_heading(self):
        out = to_workflow_content("---\ndescription: stale text\n---\n# Real heading\n\n1. Step")
        assert _front(out) == {"description": "stale text"}

    def test_existing_front_matter_replaced(self):
        out = to_workflow_content("---\nauthor: me\n---\n# Title\n\n1. Step")
        assert _front(out) == {"description": "Title"}

    def test_description_with_colon_is_valid_yaml(self):
        out = to_workflow_content("# Init: MCP only\n\nbody")
        assert _front(out)["description"] == "Init: MCP only"

    def test_long_heading_truncated_in_front_matter(self):
        out = to_workflow_content("# " + "a" * 400 + "\n\nbody")
        description = _front(out)["description"]
        assert len(description) == 250
        assert description.endswith("...")

    @pytest.mark.parametrize(
        "source",
        [
            "# Init context (MCP only)\n\nInitialize the project context.\n\n- **type**: `both`\n",
            "plain prose only",
            "---\ndescription: declared\n---\n1. one\n2. two\n",
            "",
            "# " + "long " * 80,
        ],
    )
    def test_idempotent(self, source):
        once = to_workflow_content(source)
        assert to_workflow_content(once) == once


# ---------------------------------------------------------------------------
# Rule and skill families
# ---------------------------------------------------------------------------


class TestRule:
    def test_filename(self):
        assert to_rule_filename("project-overview.md") == "project-overview.mdc"

    def test_content(self):
        out = to_rule_content("# Architecture\n\nLayers and modules.")
        assert _front(out) == {"description": "Architecture", "alwaysApply": False}
        assert out.endswith("# Architecture\n\nLayers and modules.\n")

    def test_declared_always_apply_kept(self):
        out = to_rule_content("---\nalwaysApply: true\n---\n# Style\n")
        assert _front(out)["alwaysApply"] is True

    def test_idempotent(self):
        once = to_rule_content("# Testing strategy\n\nUse pytest.")
        assert to_rule_content(once) == once


class TestSkill:
    def test_path(self):
        assert to_skill_path("commit-message.md") == "commit-message/SKILL.md"

    def test_content(self):
        out = to_skill_content("# Write commit messages\n\nUse imperative mood.", "commit-message")
        fields = _front(out)
        assert fields == {"name": "commit-message", "description": "Write commit messages"}

    def test_declared_name_kept(self):
        out = to_skill_content("---\nname: custom\n---\nbody", "stem")
        assert _front(out)["name"] == "custom"

    def test_declared_description_wins_over_heading(self):
        out = to_skill_content(
            "---\ndescription: Declared summary\n---\n# Real heading\n\nbody", "review"
        )
        assert _front(out)["description"] == "Declared summary"

    def test_blank_declared_description_falls_back_to_heading(self):
        out = to_skill_content("---\ndescription: \"  \"\n---\n# Real heading\n", "review")
        assert _front(out)["description"] == "Real heading"


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestDispatch:
    def test_every_family_has_a_transformer(self):
        for family in FormatFamily:
            assert isinstance(transform_filename(family, "a-b.md"), str)
            assert isinstance(transform_content(family, "# T\n", "a-b.md"), str)

    def test_mirror_is_identity(self):
        text = "---\nx: 1\n---\n# Keep\n  exactly  \n"
        assert transform_filename(FormatFamily.MIRROR, "Keep-Me.md") == "Keep-Me.md"
        assert transform_content(FormatFamily.MIRROR, text) == text
        assert is_verbatim(FormatFamily.MIRROR)

    def test_transforming_families_not_verbatim(self):
        assert not is_verbatim(FormatFamily.WORKFLOW)
        assert not is_verbatim(FormatFamily.RULE)
        assert not is_verbatim(FormatFamily.SKILL)

    def test_skill_name_from_filename(self):
        out = transform_content(FormatFamily.SKILL, "# Review\n", "code-review.md")
        assert yaml.safe_load(split_front_matter(out)[0])["name"] == "code-review"

    @pytest.mark.parametrize("filename", ["", "nested/"])
    def test_skill_without_filename_raises(self, filename):
        with pytest.raises(ValueError, match="filename"):
            transform_content(FormatFamily.SKILL, "# Review\n", filename)
