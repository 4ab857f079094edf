"""Tests for the ddev command runner."""

import subprocess

import pytest

from ddev_mcp.ddev.command import DdevCommandError, project_path, run_ddev, unwrap_raw


def test_runs_ddev_with_argument_vector(fake_ddev):
    fake_ddev.respond("version", stdout="ddev version v1.23\n")
    assert run_ddev(["version"]) == "ddev version v1.23\n"
    assert fake_ddev.argvs == [["ddev", "version"]]
    assert fake_ddev.calls[0]["cwd"] is None


@pytest.mark.parametrize("command", ["describe", "list", "start", "stop", "restart", "delete"])
def test_project_argument_appended(fake_ddev, command):
    run_ddev([command], project="shop")
    assert fake_ddev.argvs == [["ddev", command, "shop"]]


def test_other_commands_run_in_project_root(fake_ddev, describe_json):
    fake_ddev.respond("describe", stdout=describe_json("shop", approot="/srv/shop"))
    fake_ddev.respond("exec", stdout="ok")

    assert run_ddev(["exec", "ls -la"], project="shop") == "ok"
    assert fake_ddev.argvs == [
        ["ddev", "describe", "--json-output", "shop"],
        ["ddev", "exec", "ls -la"],
    ]
    assert fake_ddev.calls[1]["cwd"] == "/srv/shop"


def test_unknown_project_raises_before_running(fake_ddev):
    fake_ddev.respond("describe", returncode=1, stderr="project not found")
    with pytest.raises(DdevCommandError, match="Project ghost not found or not accessible"):
        run_ddev(["exec", "ls"], project="ghost")
    assert all(argv[1] != "exec" for argv in fake_ddev.argvs)


def test_failure_uses_stderr(fake_ddev):
    fake_ddev.respond("start", returncode=1, stderr="docker is not running\n", stdout="partial")
    with pytest.raises(DdevCommandError) as exc_info:
        run_ddev(["start"])
    assert str(exc_info.value) == "DDEV command failed: docker is not running"


def test_failure_falls_back_to_stdout(fake_ddev):
    fake_ddev.respond("start", returncode=2, stdout="something broke")
    with pytest.raises(DdevCommandError, match="DDEV command failed: something broke"):
        run_ddev(["start"])


def test_missing_executable(fake_ddev):
    fake_ddev.respond("version", raises=FileNotFoundError(2, "No such file or directory"))
    with pytest.raises(DdevCommandError, match="cannot run ddev"):
        run_ddev(["version"])


def test_timeout(fake_ddev):
    fake_ddev.respond("exec", raises=subprocess.TimeoutExpired(["ddev", "exec"], 5))
    with pytest.raises(DdevCommandError, match="timed out after 5s"):
        run_ddev(["exec", "sleep 60"], timeout=5)
    assert fake_ddev.calls[0]["timeout"] == 5


def test_unwrap_raw():
    assert unwrap_raw('{"raw": {"name": "a"}}') == {"name": "a"}
    assert unwrap_raw('{"name": "a"}') == {"name": "a"}
    assert unwrap_raw('{"raw": null, "msg": "x"}') == {"raw": None, "msg": "x"}


def test_project_path_prefers_approot(fake_ddev):
    fake_ddev.respond("describe", stdout='{"raw": {"approot": "/a", "shortroot": "~/a"}}')
    assert project_path("a") == "/a"


def test_project_path_shortroot_fallback(fake_ddev):
    fake_ddev.respond("describe", stdout='{"raw": {"shortroot": "~/a"}}')
    assert project_path("a") == "~/a"


def test_project_path_bad_json(fake_ddev):
    fake_ddev.respond("describe", stdout="not json")
    assert project_path("a") is None
