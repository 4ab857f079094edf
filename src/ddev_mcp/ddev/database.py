"""Run SQL inside a project's database container, behind the query policy."""

from __future__ import annotations

import enum
import logging
import shlex
import time
from dataclasses import dataclass

from ddev_mcp import querylog
from ddev_mcp.ddev.command import run_ddev
from ddev_mcp.ddev.projects import get_project_status
from ddev_mcp.policy import run_policy

logger = logging.getLogger(__name__)


class DatabaseType(enum.Enum):
    POSTGRES = "postgres"
    MYSQL = "mysql"
    MARIADB = "mariadb"


@dataclass(frozen=True)
class DbCommands:
    client: str
    command_flag: str
    database_flag: str
    list_tables: str
    list_databases: str
    describe_table_template: str

    def describe_table(self, table: str) -> str:
        return self.describe_table_template.format(table=table)


_POSTGRES_COMMANDS = DbCommands(
    client="psql",
    command_flag="-c",
    database_flag="-d",
    list_tables="\\dt",
    list_databases="\\l",
    describe_table_template="\\d {table}",
)

_MYSQL_COMMANDS = DbCommands(
    client="mysql",
    command_flag="-e",
    database_flag="-D",
    list_tables="SHOW TABLES;",
    list_databases="SHOW DATABASES;",
    describe_table_template="DESCRIBE {table};",
)


class QueryNotAllowedError(Exception):
    """Raised when the query policy refuses a statement. Nothing was executed."""

    def __init__(self, reason: str, *, rule: str | None = None) -> None:
        super().__init__(f"Query not allowed: {reason}")
        self.reason = reason
        self.rule = rule


def get_db_commands(db_type: DatabaseType) -> DbCommands:
    if db_type is DatabaseType.POSTGRES:
        return _POSTGRES_COMMANDS
    return _MYSQL_COMMANDS


def get_database_type(project: str | None = None, *, timeout: float | None = None) -> DatabaseType:
    """Engine of the project's database; mysql when unknown."""
    status = get_project_status(project, timeout=timeout)
    if status is None:
        return DatabaseType.MYSQL
    try:
        return DatabaseType(status.database_type.lower())
    except ValueError:
        logger.warning("unrecognized database type %r, assuming mysql", status.database_type)
        return DatabaseType.MYSQL


def client_command(query: str, db_type: DatabaseType, database: str | None = None) -> str:
    """Shell-quoted client invocation for ``ddev exec`` (which runs it via bash)."""
    commands = get_db_commands(db_type)
    argv = [commands.client]
    if database:
        argv += [commands.database_flag, database]
    argv += [commands.command_flag, query]
    return shlex.join(argv)


def db_query(
    query: str,
    *,
    allow_write: bool = False,
    database: str | None = None,
    project: str | None = None,
    log_queries: bool = True,
    timeout: float | None = None,
) -> str:
    """Validate and run one query.

    The policy runs before ddev is touched at all; a refused query raises
    QueryNotAllowedError without any subprocess being started. Every attempt
    is written to the query log unless ``log_queries`` is False.
    """
    result = run_policy(query, allow_write=allow_write)
    db_type: DatabaseType | None = None

    def audit(duration_ms: float | None = None) -> None:
        if not log_queries:
            return
        querylog.log_query(
            sql=result.original_sql,
            normalized_sql=result.normalized_sql,
            project=project,
            database=database,
            engine=db_type.value if db_type else None,
            tables=result.tables,
            blocked=result.blocked,
            classification=result.classification,
            rule=result.rule,
            diagnostics=result.codes(),
            write_mode=allow_write,
            duration_ms=duration_ms,
        )

    if result.blocked:
        logger.warning("query refused (%s): %s", result.rule, result.normalized_sql[:200])
        audit()
        raise QueryNotAllowedError(result.reason or "", rule=result.rule)

    db_type = get_database_type(project, timeout=timeout)
    start = time.monotonic()
    try:
        output = run_ddev(
            ["exec", client_command(query, db_type, database)],
            project=project,
            timeout=timeout,
        )
    finally:
        audit(round((time.monotonic() - start) * 1000, 1))

    mode = "Write Mode" if allow_write else "Read-Only Mode"
    return f"Query executed successfully ({db_type.value}) [{mode}]:\n\n{output}"
