"""ddev_composer_command: run Composer in the web container."""

from __future__ import annotations

import json
import shlex
from typing import Any

from ddev_mcp.config import ServerConfig
from ddev_mcp.ddev.command import run_ddev
from ddev_mcp.tools._base import PROJECT_NAME_PROPERTY, ToolSpec, optional_str, require_str

# Composer subcommands that understand --format=json.
JSON_FORMAT_COMMANDS = frozenset(
    {"show", "info", "list", "outdated", "depends", "why", "why-not", "status"}
)


def composer_args(command: str) -> list[str]:
    """Split a composer command line, asking for JSON where Composer supports it."""
    args = shlex.split(command)
    if args and args[0] in JSON_FORMAT_COMMANDS and not any(
        a.startswith("--format") for a in args
    ):
        args.append("--format=json")
    return args


def _handle(arguments: dict[str, Any], config: ServerConfig) -> str:
    output = run_ddev(
        ["composer", *composer_args(require_str(arguments, "command"))],
        project=optional_str(arguments, "project_name"),
        timeout=config.command_timeout,
    )
    try:
        data = json.loads(output)
    except ValueError:
        return f"Composer command executed successfully:\n\n{output}"
    return f"Composer command executed successfully (JSON):\n\n{json.dumps(data, indent=2)}"


TOOL = ToolSpec(
    name="ddev_composer_command",
    description="Run a Composer command in the DDEV project",
    input_schema={
        "type": "object",
        "properties": {
            "command": {"type": "string", "description": "Composer command to run"},
            "project_name": PROJECT_NAME_PROPERTY,
        },
        "required": ["command"],
    },
    handler=_handle,
)
