"""Tests for the target registry and resolution."""

import pytest

from context_sync.errors import ContextSyncError, UnknownTargetError
from context_sync.formats import FormatFamily
from context_sync.sync.targets import (
    Category,
    OverwritePolicy,
    expand_names,
    get_target,
    list_targets,
    preset_names,
    resolve_targets,
    seed_target,
    target_keys,
)


class TestRegistry:
    def test_every_category_has_targets(self):
        for category in Category:
            assert list_targets(category)

    def test_keys_unique_per_category(self):
        for category in Category:
            keys = target_keys(category)
            assert len(keys) == len(set(keys))

    def test_every_target_declares_policy(self):
        for category in Category:
            for target in list_targets(category):
                assert isinstance(target.overwrite, OverwritePolicy)

    def test_command_targets(self):
        cursor = get_target(Category.COMMANDS, "cursor")
        antigravity = get_target(Category.COMMANDS, "antigravity")

        assert cursor.path == ".cursor/commands"
        assert cursor.family is FormatFamily.MIRROR
        assert antigravity.path == ".agent/workflows"
        assert antigravity.family is FormatFamily.WORKFLOW

    def test_presets_include_all_and_each_key(self):
        names = preset_names(Category.AGENTS)
        assert names[0] == "all"
        assert set(target_keys(Category.AGENTS)) <= set(names)

    def test_get_unknown_target(self):
        with pytest.raises(UnknownTargetError) as excinfo:
            get_target(Category.SKILLS, "emacs")
        assert excinfo.value.key == "emacs"
        assert excinfo.value.category == "skills"


class TestExpandNames:
    def test_all_in_registry_order(self):
        assert expand_names(Category.AGENTS, ["all"]) == target_keys(Category.AGENTS)

    def test_mixed_names_deduplicated_first_seen(self):
        assert expand_names(Category.AGENTS, ["cursor", "all", "claude"]) == [
            "cursor",
            "claude",
            "github",
        ]

    def test_unknown_name_rejects_whole_selection(self):
        with pytest.raises(UnknownTargetError, match="Unknown agents target: 'vim'"):
            expand_names(Category.AGENTS, ["claude", "vim"])


class TestResolveTargets:
    def test_none_selects_all(self, repo):
        resolved = resolve_targets(Category.DOCS, None, repo)
        assert [t.key for t in resolved] == target_keys(Category.DOCS)

    def test_single_string(self, repo):
        resolved = resolve_targets(Category.AGENTS, "claude", repo)
        assert len(resolved) == 1
        assert resolved[0].destination == (repo / ".claude" / "agents").resolve()
        assert resolved[0].category is Category.AGENTS

    def test_empty_list_resolves_to_nothing(self, repo):
        assert resolve_targets(Category.AGENTS, [], repo) == []

    def test_unknown_key_is_validation_error(self, repo):
        with pytest.raises(ContextSyncError):
            resolve_targets(Category.COMMANDS, ["cursor", "nope"], repo)
        with pytest.raises(ValueError):
            resolve_targets(Category.COMMANDS, "nope", repo)

    def test_resolution_does_not_touch_filesystem(self, repo):
        resolve_targets(Category.SKILLS, None, repo)
        assert list(repo.iterdir()) == []

    def test_destinations_absolute(self, repo):
        for target in resolve_targets(Category.SKILLS, None, repo):
            assert target.destination.is_absolute()

    def test_preset_membership_is_stable(self, repo):
        first = resolve_targets(Category.COMMANDS, "all", repo)
        second = resolve_targets(Category.COMMANDS, "all", repo)
        assert first == second


def test_seed_target_is_generation_once(tmp_path):
    target = seed_target(tmp_path / "commands")
    assert target.overwrite is OverwritePolicy.IF_ABSENT
    assert target.family is FormatFamily.MIRROR
    assert target.destination == tmp_path / "commands"
