"""CLI entry point."""

from __future__ import annotations

import click

from ddev_mcp.cli.serve import serve
from ddev_mcp.cli.validate import validate


@click.group()
@click.version_option(package_name="ddev-mcp")
def main() -> None:
    """ddev-mcp: DDEV tools for AI agents, behind a SQL safety policy."""


main.add_command(serve)
main.add_command(validate)
