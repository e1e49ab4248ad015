"""Static registry of sync targets and presets.

Each content category (agents, skills, commands, docs) has an ordered set
of targets.  A target names a tool integration, the directory it writes
to (relative to the repository root), the format family used to
reshape files for it, and its overwrite policy.

Presets group target keys for bulk selection:

- ``all`` -- every target of the category, in registry order.
- ``<key>`` -- every target key doubles as a single-target preset.

Resolution is all-or-nothing: unknown names raise ``UnknownTargetError``
before anything touches the filesystem.  Target configuration is static
and trusted, so destination paths are not sandboxed.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from context_sync.errors import UnknownTargetError
from context_sync.formats.families import FormatFamily


class Category(str, Enum):
    """Content categories kept under the context root."""

    AGENTS = "agents"
    SKILLS = "skills"
    COMMANDS = "commands"
    DOCS = "docs"


class OverwritePolicy(str, Enum):
    """When an existing destination file may be replaced.

    ``ALWAYS`` keeps the destination identical to the source.
    ``IF_ABSENT`` writes once and only replaces the file on ``force``.
    """

    ALWAYS = "always"
    IF_ABSENT = "if_absent"


class SyncTarget(BaseModel):
    """A registered destination for one content category.

    Attributes:
        key: Tool identifier (e.g. ``"cursor"``).
        path: Destination directory relative to the repository root.
        family: Format family applied to every file.
        overwrite: Overwrite policy for existing files.
        description: Short human-readable label.
    """

    key: str
    path: str
    family: FormatFamily = FormatFamily.MIRROR
    overwrite: OverwritePolicy = OverwritePolicy.ALWAYS
    description: str = ""

    model_config = {"frozen": True}


class ResolvedTarget(BaseModel):
    """A target bound to an absolute destination directory."""

    key: str
    category: Category
    destination: Path
    family: FormatFamily
    overwrite: OverwritePolicy

    model_config = {"frozen": True}


ALL_PRESET = "all"

_REGISTRY: dict[Category, tuple[SyncTarget, ...]] = {
    Category.AGENTS: (
        SyncTarget(key="claude", path=".claude/agents", description="Claude Code subagents"),
        SyncTarget(key="github", path=".github/agents", description="GitHub Copilot agents"),
        SyncTarget(key="cursor", path=".cursor/agents", description="Cursor agents"),
    ),
    Category.SKILLS: (
        SyncTarget(
            key="claude",
            path=".claude/skills",
            family=FormatFamily.SKILL,
            description="Claude Code skills",
        ),
        SyncTarget(
            key="gemini",
            path=".gemini/skills",
            family=FormatFamily.SKILL,
            description="Gemini CLI skills",
        ),
        SyncTarget(
            key="codex",
            path=".codex/skills",
            family=FormatFamily.SKILL,
            description="Codex skills",
        ),
    ),
    Category.COMMANDS: (
        SyncTarget(key="cursor", path=".cursor/commands", description="Cursor slash commands"),
        SyncTarget(
            key="antigravity",
            path=".agent/workflows",
            family=FormatFamily.WORKFLOW,
            description="Antigravity workflows",
        ),
    ),
    Category.DOCS: (
        SyncTarget(
            key="cursor",
            path=".cursor/rules",
            family=FormatFamily.RULE,
            description="Cursor project rules",
        ),
        SyncTarget(key="windsurf", path=".windsurf/rules", description="Windsurf rules"),
        SyncTarget(key="cline", path=".clinerules", description="Cline rules"),
    ),
}


def _build_presets() -> dict[Category, dict[str, tuple[str, ...]]]:
    presets: dict[Category, dict[str, tuple[str, ...]]] = {}
    for category, targets in _REGISTRY.items():
        keys = tuple(t.key for t in targets)
        group = {ALL_PRESET: keys}
        for key in keys:
            group[key] = (key,)
        presets[category] = group
    return presets


_PRESETS = _build_presets()


# ------------------------------------------------------------------
# Lookups
# ------------------------------------------------------------------


def list_targets(category: Category) -> list[SyncTarget]:
    """Return the registered targets for *category* in registry order."""
    return list(_REGISTRY[category])


def get_target(category: Category, key: str) -> SyncTarget:
    """Return the target registered under *key*.

    Raises:
        UnknownTargetError: If *key* is not registered for *category*.
    """
    for target in _REGISTRY[category]:
        if target.key == key:
            return target
    raise UnknownTargetError(key, category.value, target_keys(category))


def target_keys(category: Category) -> list[str]:
    """Return the target keys for *category*."""
    return [t.key for t in _REGISTRY[category]]


def preset_names(category: Category) -> list[str]:
    """Return the preset names accepted for *category*."""
    return list(_PRESETS[category])


def expand_names(category: Category, names: list[str]) -> list[str]:
    """Expand preset names and target keys into a list of target keys.

    Duplicates are removed, keeping first-seen order.

    Raises:
        UnknownTargetError: On the first name that is neither a preset
            nor a target key.  Nothing is returned partially.
    """
    presets = _PRESETS[category]
    keys: list[str] = []
    for name in names:
        expanded = presets.get(name)
        if expanded is None:
            raise UnknownTargetError(name, category.value, preset_names(category))
        for key in expanded:
            if key not in keys:
                keys.append(key)
    return keys


# ------------------------------------------------------------------
# Resolution
# ------------------------------------------------------------------


def resolve_targets(
    category: Category,
    selection: str | list[str] | None,
    repo_root: Path,
) -> list[ResolvedTarget]:
    """Resolve a preset name or list of names into bound targets.

    Args:
        category: Content category being synced.
        selection: ``None`` selects the ``all`` preset; a string is a
            single preset or key; a list may mix presets and keys.  An
            empty list means "skip this category" and resolves to ``[]``.
        repo_root: Repository root that destination paths are joined to.

    Returns:
        Resolved targets in selection order.

    Raises:
        UnknownTargetError: If any name is not registered.
    """
    if selection is None:
        names = [ALL_PRESET]
    elif isinstance(selection, str):
        names = [selection]
    else:
        names = list(selection)

    keys = expand_names(category, names)
    root = repo_root.resolve()
    resolved: list[ResolvedTarget] = []
    for key in keys:
        target = get_target(category, key)
        resolved.append(
            ResolvedTarget(
                key=target.key,
                category=category,
                destination=(root / target.path).resolve(),
                family=target.family,
                overwrite=target.overwrite,
            )
        )
    return resolved


def seed_target(commands_dir: Path) -> ResolvedTarget:
    """Return the generation-once target used to seed *commands_dir*."""
    return ResolvedTarget(
        key="seed",
        category=Category.COMMANDS,
        destination=commands_dir,
        family=FormatFamily.MIRROR,
        overwrite=OverwritePolicy.IF_ABSENT,
    )
