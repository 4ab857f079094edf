"""Root conftest: shared fixtures and markers."""

from __future__ import annotations

import json
import os
import subprocess

import pytest


def pytest_configure(config):
    config.addinivalue_line("markers", "ddev: requires a working ddev installation")


def pytest_collection_modifyitems(config, items):
    if os.environ.get("DDEV_MCP_TEST_DDEV"):
        return

    skip_ddev = pytest.mark.skip(reason="ddev not available (set DDEV_MCP_TEST_DDEV=1)")
    for item in items:
        if "ddev" in item.keywords:
            item.add_marker(skip_ddev)


@pytest.fixture(autouse=True)
def _isolated_query_log(tmp_path, monkeypatch):
    """Keep the audit log out of the real home directory."""
    monkeypatch.setattr("ddev_mcp.querylog._LOG_ROOT", tmp_path / "query-logs")


def describe_output(
    name: str = "shop",
    *,
    status: str = "running",
    database_type: str = "mysql",
    approot: str = "/home/dev/shop",
    **extra,
) -> str:
    """``ddev describe --json-output`` as ddev prints it."""
    raw = {
        "name": name,
        "status": status,
        "type": "php",
        "primary_url": f"https://{name}.ddev.site",
        "approot": approot,
        "shortroot": approot.replace("/home/dev", "~"),
        "database_type": database_type,
        **extra,
    }
    return json.dumps({"level": "info", "msg": "", "raw": raw})


class FakeDdev:
    """Stands in for ``subprocess.run`` when the command is ddev.

    Responses are keyed by argument prefix (without the leading ``ddev``); the
    longest matching prefix wins. Unmatched calls succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: list[dict] = []
        self._responses: dict[tuple[str, ...], dict] = {}

    def respond(
        self,
        *prefix: str,
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
        raises: BaseException | None = None,
    ) -> None:
        self._responses[prefix] = {
            "stdout": stdout,
            "stderr": stderr,
            "returncode": returncode,
            "raises": raises,
        }

    @property
    def argvs(self) -> list[list[str]]:
        return [call["argv"] for call in self.calls]

    def __call__(self, argv, *, cwd=None, capture_output=False, text=False, check=False, timeout=None):
        argv = list(argv)
        self.calls.append({"argv": argv, "cwd": cwd, "timeout": timeout})

        args = tuple(argv[1:])
        matches = [p for p in self._responses if args[: len(p)] == p]
        response = self._responses[max(matches, key=len)] if matches else {
            "stdout": "", "stderr": "", "returncode": 0, "raises": None,
        }
        if response["raises"] is not None:
            raise response["raises"]
        if check and response["returncode"] != 0:
            raise subprocess.CalledProcessError(
                response["returncode"], argv, output=response["stdout"], stderr=response["stderr"]
            )
        return subprocess.CompletedProcess(
            argv, response["returncode"], stdout=response["stdout"], stderr=response["stderr"]
        )


@pytest.fixture
def fake_ddev(monkeypatch) -> FakeDdev:
    fake = FakeDdev()
    monkeypatch.setattr("ddev_mcp.ddev.command.subprocess.run", fake)
    return fake


@pytest.fixture
def describe_json():
    return describe_output
