"""Server configuration: ~/.ddev-mcp/config.toml plus command-line overrides."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path

CONFIG_FILE = Path.home() / ".ddev-mcp" / "config.toml"

DEFAULT_COMMAND_TIMEOUT = 120.0


class ConfigError(Exception):
    """Raised for unreadable or ill-typed configuration."""


@dataclass(frozen=True)
class ServerConfig:
    """Effective server settings.

    ``single_project`` pins every call to one project and hides project
    selection. ``allowed_commands`` of None means every tool is available.
    """

    single_project: str | None = None
    allow_write: bool = False
    allowed_commands: tuple[str, ...] | None = None
    log_queries: bool = True
    command_timeout: float | None = DEFAULT_COMMAND_TIMEOUT
    log_level: str = "INFO"

    @property
    def security_mode(self) -> str:
        return "write-enabled" if self.allow_write else "read-only"

    def with_overrides(self, **overrides: object) -> ServerConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if "allowed_commands" in changes:
            changes["allowed_commands"] = parse_allowed_commands(changes["allowed_commands"])
        return replace(self, **changes)


def parse_allowed_commands(value: object) -> tuple[str, ...] | None:
    """Accept "a,b" or ["a", "b"]; blank entries are dropped, empty means None."""
    if value is None:
        return None
    if isinstance(value, str):
        items = value.split(",")
    elif isinstance(value, list | tuple):
        items = [str(v) for v in value]
    else:
        raise ConfigError(f"allowed_commands must be a string or list, got {type(value).__name__}")
    commands = tuple(item.strip() for item in items if item.strip())
    return commands or None


_EXPECTED_TYPES: dict[str, tuple[type, ...]] = {
    "single_project": (str,),
    "allow_write": (bool,),
    "allowed_commands": (str, list),
    "log_queries": (bool,),
    "command_timeout": (int, float),
    "log_level": (str,),
}


def load_config(path: Path | None = None) -> ServerConfig:
    """Load the [server] table of the config file. Missing file → defaults."""
    path = path or CONFIG_FILE
    if not path.exists():
        return ServerConfig()

    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    section = data.get("server", {})
    if not isinstance(section, dict):
        raise ConfigError(f"{path}: [server] must be a table")

    known = {f.name for f in fields(ServerConfig)}
    values: dict[str, object] = {}
    for key, value in section.items():
        if key not in known:
            continue
        expected = _EXPECTED_TYPES[key]
        # bool is an int subclass; a timeout of `true` is still wrong.
        if not isinstance(value, expected) or (bool not in expected and isinstance(value, bool)):
            names = " or ".join(t.__name__ for t in expected)
            raise ConfigError(f"{path}: '{key}' must be {names}, got {type(value).__name__}")
        values[key] = value

    if "allowed_commands" in values:
        values["allowed_commands"] = parse_allowed_commands(values["allowed_commands"])
    if "command_timeout" in values:
        timeout = float(values["command_timeout"])
        values["command_timeout"] = timeout if timeout > 0 else None
    return ServerConfig(**values)
