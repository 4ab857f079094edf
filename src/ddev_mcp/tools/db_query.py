"""ddev_db_query: run one SQL statement in the project database."""

from __future__ import annotations

from typing import Any

from ddev_mcp.config import ServerConfig
from ddev_mcp.ddev.database import db_query
from ddev_mcp.tools._base import PROJECT_NAME_PROPERTY, ToolSpec, optional_str, require_str


def _handle(arguments: dict[str, Any], config: ServerConfig) -> str:
    return db_query(
        require_str(arguments, "query"),
        allow_write=config.allow_write,
        database=optional_str(arguments, "database"),
        project=optional_str(arguments, "project_name"),
        log_queries=config.log_queries,
        timeout=config.command_timeout,
    )


TOOL = ToolSpec(
    name="ddev_db_query",
    description=(
        "Execute a SQL query on the DDEV database. Read-only statements only "
        "unless the server runs with write operations enabled."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "SQL query to execute"},
            "database": {"type": "string", "description": "Database name (optional)"},
            "project_name": PROJECT_NAME_PROPERTY,
        },
        "required": ["query"],
    },
    handler=_handle,
)
