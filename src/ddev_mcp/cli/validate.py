"""The `validate` command: classify SQL without executing it."""

from __future__ import annotations

import json

import click

from ddev_mcp.diagnostics.render import render_json, render_text
from ddev_mcp.policy import run_policy


@click.command()
@click.argument("sql")
@click.option("--dialect", default=None, help="SQL dialect for table extraction (mysql, postgres).")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "text"]),
    default="text",
    help="Output format.",
)
@click.option("--allow-write", is_flag=True, help="Classify as the server would in write mode.")
def validate(sql: str, dialect: str | None, output_format: str, allow_write: bool) -> None:
    """Check SQL against the query policy. Exits 1 when the query would be refused."""
    result = run_policy(sql, allow_write=allow_write, dialect=dialect)
    if output_format == "json":
        click.echo(json.dumps(render_json(result), indent=2))
    else:
        output = render_text(result)
        if output:
            click.echo(output)
    if result.blocked:
        raise SystemExit(1)
