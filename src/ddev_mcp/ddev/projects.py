"""Project discovery via ``ddev describe`` / ``ddev list``."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ddev_mcp.ddev.command import DdevCommandError, run_ddev, unwrap_raw

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


@dataclass
class Project:
    name: str
    status: str = "unknown"
    running: bool = False
    type: str = "unknown"
    primary_url: str = NOT_AVAILABLE
    shortroot: str = NOT_AVAILABLE
    approot: str = NOT_AVAILABLE
    database_type: str = "mysql"
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_raw(cls, raw: dict[str, Any], *, fallback_name: str = "current") -> Project:
        """Build from the ``raw`` payload of ``--json-output``."""
        dbinfo = raw.get("dbinfo") if isinstance(raw.get("dbinfo"), dict) else {}
        status = raw.get("status") or "unknown"
        return cls(
            name=raw.get("name") or fallback_name,
            status=status,
            running=status == "running",
            type=raw.get("type") or "unknown",
            primary_url=raw.get("primary_url") or NOT_AVAILABLE,
            shortroot=raw.get("shortroot") or raw.get("approot") or NOT_AVAILABLE,
            approot=raw.get("approot") or NOT_AVAILABLE,
            database_type=raw.get("database_type") or dbinfo.get("database_type") or "mysql",
            raw=raw,
        )

    def to_dict(self) -> dict[str, Any]:
        """Raw ddev fields overlaid with the normalized ones."""
        return {
            **self.raw,
            "name": self.name,
            "status": self.status,
            "running": self.running,
            "type": self.type,
            "primary_url": self.primary_url,
            "shortroot": self.shortroot,
            "approot": self.approot,
            "database": {"type": self.database_type},
        }


def get_project_status(name: str | None = None, *, timeout: float | None = None) -> Project | None:
    """Describe one project (the cwd project when ``name`` is None).

    Returns None when ddev fails or prints something that is not a JSON object.
    """
    try:
        output = run_ddev(["describe", "--json-output"], project=name, timeout=timeout)
        raw = unwrap_raw(output)
    except (DdevCommandError, ValueError) as e:
        logger.warning("describe failed for %s: %s", name or "current project", e)
        return None

    if not isinstance(raw, dict):
        logger.warning("describe returned unexpected payload for %s", name or "current project")
        return None
    return Project.from_raw(raw, fallback_name=name or "current")


def list_projects(*, timeout: float | None = None) -> list[Project]:
    """All projects known to ddev. DdevCommandError propagates."""
    output = run_ddev(["list", "--json-output"], timeout=timeout)
    try:
        raw = unwrap_raw(output)
    except ValueError as e:
        raise DdevCommandError(f"DDEV command failed: unparseable list output: {e}") from e

    if not isinstance(raw, list):
        return []
    return [Project.from_raw(item, fallback_name="unknown") for item in raw if isinstance(item, dict)]
