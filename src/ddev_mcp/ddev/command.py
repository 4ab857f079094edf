"""Run the ddev executable and capture its output."""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Sequence

logger = logging.getLogger(__name__)

DDEV_EXECUTABLE = "ddev"

# ddev subcommands that take the project name as a trailing argument.
_PROJECT_ARG_COMMANDS = frozenset({"describe", "list", "start", "stop", "restart", "delete"})


class DdevCommandError(Exception):
    """Raised when a ddev invocation fails, times out, or cannot start."""


def _run(
    argv: list[str], *, cwd: str | None = None, timeout: float | None = None
) -> subprocess.CompletedProcess[str]:
    logger.debug("running %s (cwd=%s)", argv, cwd)
    return subprocess.run(
        argv,
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
        timeout=timeout,
    )


def run_ddev(
    args: Sequence[str],
    *,
    project: str | None = None,
    timeout: float | None = None,
) -> str:
    """Run ``ddev <args>`` and return stdout.

    With ``project``, subcommands that accept a project name get it appended;
    every other subcommand (exec, composer, ...) runs from the project's
    approot, since ddev selects the project by working directory.

    Raises DdevCommandError on non-zero exit, timeout, or missing executable.
    """
    argv = [DDEV_EXECUTABLE, *args]
    cwd: str | None = None

    if project and args and args[0] in _PROJECT_ARG_COMMANDS:
        argv.append(project)
    elif project:
        cwd = project_path(project, timeout=timeout)
        if cwd is None:
            raise DdevCommandError(
                f"DDEV command failed: Project {project} not found or not accessible"
            )

    try:
        result = _run(argv, cwd=cwd, timeout=timeout)
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or (e.stdout or "").strip() or str(e)
        raise DdevCommandError(f"DDEV command failed: {detail}") from e
    except subprocess.TimeoutExpired as e:
        raise DdevCommandError(
            f"DDEV command failed: timed out after {e.timeout:g}s: {' '.join(argv)}"
        ) from e
    except OSError as e:
        raise DdevCommandError(f"DDEV command failed: cannot run {DDEV_EXECUTABLE}: {e}") from e

    return result.stdout


def unwrap_raw(output: str) -> object:
    """Parse ``--json-output`` and return its ``raw`` payload (or the whole document)."""
    data = json.loads(output)
    if isinstance(data, dict) and data.get("raw") is not None:
        return data["raw"]
    return data


def project_path(project: str, *, timeout: float | None = None) -> str | None:
    """Resolve a project's root directory, or None if ddev does not know it."""
    try:
        output = _run(
            [DDEV_EXECUTABLE, "describe", "--json-output", project], timeout=timeout
        ).stdout
        raw = unwrap_raw(output)
    except (subprocess.SubprocessError, OSError, ValueError) as e:
        logger.warning("cannot resolve path of project %s: %s", project, e)
        return None

    if not isinstance(raw, dict):
        return None
    return raw.get("approot") or raw.get("shortroot") or None
