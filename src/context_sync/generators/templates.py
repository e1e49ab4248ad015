"""Predefined slash-command templates for ``<context>/commands``.

Each template becomes a command file that the quick sync then fans out
to every command target: Cursor reads the file as-is (filename becomes
``/command-name``), workflow targets receive it reshaped into numbered
steps.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandTemplate:
    """A built-in command file.

    Attributes:
        filename: Kebab-case filename, e.g. ``init-mcp-only.md``.
        content: Markdown body, without front matter.
    """

    filename: str
    content: str


PREDEFINED_COMMANDS: tuple[CommandTemplate, ...] = (
    CommandTemplate(
        filename="init-mcp-only.md",
        content="""# Init context (MCP only)

Initialize the project context **only via MCP**, do not run init from the CLI.

Use the `context_init` tool in your MCP-enabled client (e.g. Cursor, Claude). Suggested parameters:

- **type**: `both` (docs + agents)
- **force_commands**: `false`

This ensures the scaffolding is created and filled using the MCP server attached to this repo.
""",
    ),
)
