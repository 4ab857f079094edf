"""Query audit log: daily JSONL files per working directory, with retention cleanup."""

from __future__ import annotations

import contextlib
import json
import logging
import os
from datetime import UTC, datetime, timedelta
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30
_LOG_ROOT = Path.home() / ".ddev-mcp" / "logs"


def _project_slug() -> str:
    """Encode cwd into a directory-safe slug."""
    cwd = os.getcwd()
    return cwd.replace("/", "-").lstrip("-")


def _log_dir() -> Path:
    return _LOG_ROOT / _project_slug()


def _today_file() -> Path:
    today = datetime.now(UTC).strftime("%Y-%m-%d")
    return _log_dir() / f"{today}.jsonl"


def log_query(
    *,
    sql: str,
    normalized_sql: str,
    project: str | None = None,
    database: str | None = None,
    engine: str | None = None,
    tables: list[str] | None = None,
    blocked: bool = False,
    classification: str | None = None,
    rule: str | None = None,
    diagnostics: list[str] | None = None,
    write_mode: bool = False,
    duration_ms: float | None = None,
) -> None:
    """Append one entry to today's JSONL file.

    The audit log must never take a query down with it: write failures are
    logged and dropped.
    """
    entry = {
        "ts": datetime.now(UTC).isoformat(),
        "project": project,
        "database": database,
        "engine": engine,
        "sql": sql,
        "normalized_sql": normalized_sql,
        "tables": tables or [],
        "blocked": blocked,
        "classification": classification,
        "rule": rule,
        "diagnostics": diagnostics or [],
        "write_mode": write_mode,
        "duration_ms": duration_ms,
    }

    log_file = _today_file()
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        with open(log_file, "a") as f:
            f.write(json.dumps(entry, default=str) + "\n")
    except OSError as e:
        logger.error("cannot write query log %s: %s", log_file, e)


def read_entries(day: str | None = None) -> list[dict]:
    """Entries of one day's file (today by default), oldest first."""
    log_file = _log_dir() / f"{day}.jsonl" if day else _today_file()
    if not log_file.exists():
        return []
    with open(log_file) as f:
        return [json.loads(line) for line in f if line.strip()]


def cleanup_old_logs(*, retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
    """Delete log files older than retention_days. Returns count of deleted files."""
    cutoff = datetime.now(UTC) - timedelta(days=retention_days)
    deleted = 0

    log_dir = _log_dir()
    if not log_dir.exists():
        return 0

    for log_file in log_dir.glob("*.jsonl"):
        try:
            file_date = datetime.strptime(log_file.stem, "%Y-%m-%d").replace(tzinfo=UTC)
        except ValueError:
            continue
        if file_date < cutoff:
            log_file.unlink()
            deleted += 1

    # rmdir only succeeds once the directory is empty
    with contextlib.suppress(OSError):
        log_dir.rmdir()

    return deleted
