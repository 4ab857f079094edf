"""Tests for the individual tool handlers."""

import json
import shlex

import pytest
from mcp.shared.exceptions import McpError

from ddev_mcp import querylog
from ddev_mcp.config import ServerConfig
from ddev_mcp.ddev.command import DdevCommandError
from ddev_mcp.tools import TOOLS, TOOLS_BY_NAME, ToolError, handle_tool_error
from ddev_mcp.tools.composer_command import composer_args

READ_ONLY = ServerConfig()


def run(name, arguments, config=READ_ONLY):
    return TOOLS_BY_NAME[name].run(arguments, config)


def test_registry_order_and_names():
    assert [t.name for t in TOOLS] == [
        "ddev_composer_command",
        "ddev_db_query",
        "ddev_exec_command",
        "ddev_list_projects",
        "ddev_project_status",
    ]


def test_schema_offers_project_name_by_default():
    schema = TOOLS_BY_NAME["ddev_db_query"].schema_for(READ_ONLY)
    assert "project_name" in schema["properties"]
    assert schema["required"] == ["query"]


def test_schema_hides_project_name_in_single_project_mode():
    tool = TOOLS_BY_NAME["ddev_db_query"]
    schema = tool.schema_for(ServerConfig(single_project="shop"))
    assert "project_name" not in schema["properties"]
    assert "query" in schema["properties"]
    # The registered schema itself is untouched.
    assert "project_name" in tool.input_schema["properties"]


# -- ddev_db_query ---------------------------------------------------------------


def test_db_query_read_only(fake_ddev, describe_json):
    fake_ddev.respond("describe", stdout=describe_json())
    fake_ddev.respond("exec", stdout="Tables_in_db\nusers\n")
    text = run("ddev_db_query", {"query": "SHOW TABLES", "project_name": "shop"})
    assert text.startswith("Query executed successfully (mysql) [Read-Only Mode]:")
    assert "users" in text


def test_db_query_denied_in_read_only_mode(fake_ddev):
    with pytest.raises(ToolError) as exc_info:
        run("ddev_db_query", {"query": "DELETE FROM users"})
    message = str(exc_info.value)
    assert message.startswith("Tool execution failed: Query not allowed:")
    assert "whitelist" in message
    assert fake_ddev.calls == []


def test_db_query_write_mode(fake_ddev):
    text = run("ddev_db_query", {"query": "DELETE FROM users WHERE id = 1"}, ServerConfig(allow_write=True))
    assert "[Write Mode]" in text


def test_db_query_catastrophic_in_write_mode(fake_ddev):
    with pytest.raises(ToolError, match="catastrophic"):
        run("ddev_db_query", {"query": "DROP DATABASE db"}, ServerConfig(allow_write=True))


def test_db_query_requires_query(fake_ddev):
    with pytest.raises(ToolError, match="'query' is required"):
        run("ddev_db_query", {})


def test_db_query_honours_log_setting(fake_ddev):
    run("ddev_db_query", {"query": "SELECT 1"}, ServerConfig(log_queries=False))
    assert querylog.read_entries() == []


# -- ddev_exec_command -----------------------------------------------------------


def test_exec_command(fake_ddev, describe_json):
    fake_ddev.respond("describe", stdout=describe_json(approot="/srv/shop"))
    fake_ddev.respond("exec", stdout="total 0\n")
    text = run("ddev_exec_command", {"command": "ls -la", "project_name": "shop"})
    assert text == "Command executed successfully:\n\ntotal 0\n"
    assert fake_ddev.calls[-1]["argv"] == ["ddev", "exec", "ls -la"]
    assert fake_ddev.calls[-1]["cwd"] == "/srv/shop"


def test_exec_command_failure(fake_ddev):
    fake_ddev.respond("exec", returncode=127, stderr="bash: nope: command not found")
    with pytest.raises(ToolError) as exc_info:
        run("ddev_exec_command", {"command": "nope"})
    assert str(exc_info.value) == "DDEV command failed:\n\nbash: nope: command not found"


def test_exec_command_uses_configured_timeout(fake_ddev):
    run("ddev_exec_command", {"command": "true"}, ServerConfig(command_timeout=7.5))
    assert fake_ddev.calls[-1]["timeout"] == 7.5


# -- ddev_composer_command -------------------------------------------------------


@pytest.mark.parametrize(
    "command,expected",
    [
        ("show", ["show", "--format=json"]),
        ("outdated --direct", ["outdated", "--direct", "--format=json"]),
        ("why-not php 8.4", ["why-not", "php", "8.4", "--format=json"]),
        ("show --format=text", ["show", "--format=text"]),
        ("require drush/drush", ["require", "drush/drush"]),
        ("install --no-dev", ["install", "--no-dev"]),
    ],
)
def test_composer_args(command, expected):
    assert composer_args(command) == expected


def test_composer_json_output_is_pretty_printed(fake_ddev):
    fake_ddev.respond("composer", stdout='{"installed":[{"name":"a/b"}]}')
    text = run("ddev_composer_command", {"command": "show"})
    assert text.startswith("Composer command executed successfully (JSON):\n\n")
    assert json.loads(text.split("\n\n", 1)[1]) == {"installed": [{"name": "a/b"}]}
    assert fake_ddev.calls[-1]["argv"] == ["ddev", "composer", "show", "--format=json"]


def test_composer_plain_output(fake_ddev):
    fake_ddev.respond("composer", stdout="Nothing to install\n")
    text = run("ddev_composer_command", {"command": "install"})
    assert text == "Composer command executed successfully:\n\nNothing to install\n"


def test_composer_quoted_arguments(fake_ddev):
    run("ddev_composer_command", {"command": "require 'vendor/pkg:^2.0'"})
    assert fake_ddev.calls[-1]["argv"] == ["ddev", "composer", "require", "vendor/pkg:^2.0"]
    assert shlex.join(fake_ddev.calls[-1]["argv"][2:]) == "require 'vendor/pkg:^2.0'"


# -- ddev_list_projects / ddev_project_status ------------------------------------


def test_list_projects(fake_ddev):
    raw = [{"name": "shop", "status": "running", "type": "drupal", "shortroot": "~/shop",
            "approot": "/home/dev/shop", "primary_url": "https://shop.ddev.site"}]
    fake_ddev.respond("list", stdout=json.dumps({"raw": raw}))
    text = run("ddev_list_projects", {})
    assert text.startswith("Found 1 DDEV projects:\n\n")
    assert "• shop (running)" in text
    assert "  Location: ~/shop" in text
    assert "  Type: drupal" in text
    assert "  URLs: https://shop.ddev.site" in text


def test_list_projects_refused_in_single_project_mode(fake_ddev):
    with pytest.raises(McpError) as exc_info:
        run("ddev_list_projects", {}, ServerConfig(single_project="shop"))
    assert "not available in single project mode" in exc_info.value.error.message
    assert fake_ddev.calls == []


def test_list_projects_failure(fake_ddev):
    fake_ddev.respond("list", returncode=1, stderr="docker is not running")
    with pytest.raises(ToolError, match="DDEV command failed:\n\ndocker is not running"):
        run("ddev_list_projects", {})


def test_project_status(fake_ddev, describe_json):
    fake_ddev.respond("describe", stdout=describe_json("shop"))
    text = run("ddev_project_status", {"project_name": "shop"})
    assert text.startswith("DDEV Project Status:\n\n")
    data = json.loads(text.split("\n\n", 1)[1])
    assert data["name"] == "shop"
    assert data["running"] is True


def test_project_status_not_found(fake_ddev):
    fake_ddev.respond("describe", returncode=1, stderr="no project")
    assert run("ddev_project_status", {"project_name": "ghost"}) == "DDEV project not found: ghost"
    assert run("ddev_project_status", {}) == "DDEV project not found: current"


# -- error mapping ----------------------------------------------------------------


def test_handle_tool_error_ddev():
    error = handle_tool_error(DdevCommandError("DDEV command failed: boom"))
    assert str(error) == "DDEV command failed:\n\nboom"


def test_handle_tool_error_other():
    assert str(handle_tool_error(ValueError("bad"))) == "Tool execution failed: bad"
