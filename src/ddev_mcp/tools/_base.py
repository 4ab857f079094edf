"""Shared tool plumbing: tool definitions, argument access, error mapping."""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from mcp.shared.exceptions import McpError

from ddev_mcp.config import ServerConfig
from ddev_mcp.ddev.command import DdevCommandError

logger = logging.getLogger(__name__)

PROJECT_NAME_PROPERTY = {
    "type": "string",
    "description": "Name of the DDEV project",
}

Handler = Callable[[dict[str, Any], ServerConfig], str]


class ToolError(Exception):
    """A tool failed; the message is what the client sees."""


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_schema: dict[str, Any]
    handler: Handler

    def schema_for(self, config: ServerConfig) -> dict[str, Any]:
        """Input schema as advertised under ``config``.

        With a single project configured, project selection is not offered.
        """
        schema = copy.deepcopy(self.input_schema)
        if config.single_project:
            schema.get("properties", {}).pop("project_name", None)
            if "project_name" in schema.get("required", []):
                schema["required"].remove("project_name")
        return schema

    def run(self, arguments: dict[str, Any], config: ServerConfig) -> str:
        try:
            return self.handler(arguments, config)
        except (ToolError, McpError):
            raise
        except Exception as e:
            logger.error("tool %s failed: %s", self.name, e)
            raise handle_tool_error(e) from e


def handle_tool_error(error: Exception) -> ToolError:
    """Map a failure to the message returned to the client."""
    if isinstance(error, DdevCommandError):
        detail = str(error).removeprefix("DDEV command failed: ")
        return ToolError(f"DDEV command failed:\n\n{detail}")
    return ToolError(f"Tool execution failed: {error}")


def require_str(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"'{key}' is required and must be a non-empty string")
    return value


def optional_str(arguments: dict[str, Any], key: str) -> str | None:
    value = arguments.get(key)
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value
