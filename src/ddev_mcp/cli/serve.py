"""The `serve` command: run the MCP server on stdio."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from click.core import ParameterSource

from ddev_mcp.config import ConfigError, ServerConfig, load_config
from ddev_mcp.querylog import cleanup_old_logs
from ddev_mcp.server import DdevMcpServer

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def configure_logging(level: str) -> None:
    # stdout carries the protocol.
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_config(
    config_path: Path | None,
    *,
    single_project: str | None,
    allow_write: bool | None,
    allowed_commands: str | None,
    log_level: str | None,
) -> ServerConfig:
    try:
        return load_config(config_path).with_overrides(
            single_project=single_project,
            allow_write=allow_write,
            allowed_commands=allowed_commands,
            log_level=log_level,
        )
    except ConfigError as e:
        raise click.ClickException(str(e)) from e


@click.command()
@click.option(
    "-p",
    "--single-project",
    envvar="DDEV_MCP_SINGLE_PROJECT",
    default=None,
    help="Restrict every call to this project and hide project selection.",
)
@click.option(
    "-w/-r",
    "--allow-write/--read-only",
    "allow_write",
    envvar="DDEV_MCP_ALLOW_WRITE",
    default=False,
    help="Permit statements outside the read-only whitelist (catastrophic ones stay blocked).",
)
@click.option(
    "-c",
    "--allowed-commands",
    envvar="DDEV_MCP_ALLOWED_COMMANDS",
    default=None,
    help="Comma-separated tool names to expose (default: all).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    envvar="DDEV_MCP_CONFIG",
    default=None,
    help="Config file (default: ~/.ddev-mcp/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    envvar="DDEV_MCP_LOG_LEVEL",
    default=None,
    help="Log level for stderr output.",
)
def serve(
    single_project: str | None,
    allow_write: bool | None,
    allowed_commands: str | None,
    config_path: Path | None,
    log_level: str | None,
) -> None:
    """Run the DDEV MCP server on stdio."""
    # Only an explicit flag or environment value overrides the config file.
    if click.get_current_context().get_parameter_source("allow_write") is ParameterSource.DEFAULT:
        allow_write = None
    config = build_config(
        config_path,
        single_project=single_project,
        allow_write=allow_write,
        allowed_commands=allowed_commands,
        log_level=log_level,
    )
    configure_logging(config.log_level)

    if config.log_queries:
        deleted = cleanup_old_logs()
        if deleted:
            logger.info("removed %d expired query log file(s)", deleted)

    asyncio.run(DdevMcpServer(config).run())
