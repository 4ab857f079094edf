"""Rule tables for the query classifier.

All patterns are written against upper-cased, whitespace-folded text.
Catastrophic rules see both the comment-stripped and the raw form; the
whitelist sees only the comment-stripped form. The tables are module-level
tuples and are never mutated after import.
"""

from __future__ import annotations

import re
from dataclasses import dataclass


@dataclass(frozen=True)
class Rule:
    """A named pattern rule.

    Matches when every ``required`` pattern is found and ``forbidden`` (if
    any) is not. Conjunctions of short patterns keep every rule linear in the
    statement length; no rule relies on an unbounded ``.*`` span.
    """

    name: str
    category: str
    required: tuple[re.Pattern[str], ...]
    forbidden: re.Pattern[str] | None = None

    def matches(self, text: str) -> bool:
        if not all(p.search(text) for p in self.required):
            return False
        return self.forbidden is None or self.forbidden.search(text) is None


def _rule(
    name: str, category: str, *patterns: str, forbidden: str | None = None
) -> Rule:
    return Rule(
        name=name,
        category=category,
        required=tuple(re.compile(p) for p in patterns),
        forbidden=re.compile(forbidden) if forbidden is not None else None,
    )


# -- Catastrophic: denied regardless of write mode ------------------------------

_SCHEMA_ROOT = "destructive schema-root operation"
_LIFECYCLE = "server lifecycle control"
_FILESYSTEM = "file-system access through the database engine"
_SHELL = "shell or program invocation"
_PRIVILEGE = "privilege escalation"
_SESSION = "session configuration tampering"
_INJECTION = "injection-shaped statement"
_DISCLOSURE = "disclosure of server internals"

_GRANTABLE = (
    r"ALL|CREATE|DROP|ALTER|DELETE|INSERT|UPDATE|SELECT|SUPER|RELOAD|LOCK\s+TABLES"
    r"|REPLICATION|BINLOG|PROCESS|FILE|REFERENCES|INDEX|SHUTDOWN|EXECUTE|EVENT|TRIGGER"
    r"|SHOW\s+VIEW|USAGE"
)

CATASTROPHIC_RULES: tuple[Rule, ...] = (
    _rule("drop_database", _SCHEMA_ROOT, r"\bDROP\s+(?:DATABASE|SCHEMA|TABLESPACE)\b"),
    _rule("shutdown", _LIFECYCLE, r"\bSHUTDOWN\b"),
    _rule("kill", _LIFECYCLE, r"\bKILL\b"),
    _rule("load_file", _FILESYSTEM, r"\bLOAD_FILE\b"),
    _rule("into_outfile", _FILESYSTEM, r"\bINTO\s+(?:OUTFILE|DUMPFILE)\b"),
    _rule("load_data_local", _FILESYSTEM, r"\bLOAD\s+DATA\s+LOCAL\s+INFILE\b"),
    # MySQL runs the body of /*! ... */ and /*!NNNNN ... */; only the raw form keeps it.
    _rule("executable_comment", _SHELL, r"/\*!"),
    _rule("client_shell_escape", _SHELL, r"\\!"),
    _rule("copy_from_program", _SHELL, r"\bCOPY\b", r"\bFROM\s+PROGRAM\b"),
    _rule("grant_privileges", _PRIVILEGE, rf"\bGRANT\s+(?:{_GRANTABLE})\b"),
    _rule("create_user", _PRIVILEGE, r"\bCREATE\s+(?:USER|ROLE)\b"),
    _rule("alter_role_superuser", _PRIVILEGE, r"\bALTER\s+(?:USER|ROLE)\b", r"\bSUPERUSER\b"),
    _rule("set_global", _SESSION, r"\bSET\s+(?:GLOBAL|SESSION|PERSIST|PERSIST_ONLY)\b"),
    _rule("set_system_variable", _SESSION, r"\bSET\s+@@"),
    _rule("leading_union_select", _INJECTION, r"^\s*UNION\s+(?:ALL\s+)?SELECT\b"),
    _rule(
        "server_directory_variable",
        _DISCLOSURE,
        r"@@(?:GLOBAL\.|SESSION\.)?(?:DATADIR|BASEDIR|TMPDIR|SECURE_FILE_PRIV|PLUGIN_DIR)\b",
    ),
    _rule("show_grants", _DISCLOSURE, r"\bSHOW\s+GRANTS\b"),
)


# -- Read-only whitelist: consulted only when write mode is off -----------------

CTE_DENY_KEYWORDS: tuple[str, ...] = (
    "INSERT", "UPDATE", "DELETE", "CREATE", "DROP", "ALTER", "TRUNCATE",
    "REPLACE", "MERGE", "GRANT", "REVOKE", "SET", "RESET", "CALL", "EXECUTE",
    "EXEC", "COPY", "VACUUM", "ANALYZE", "CLUSTER", "REINDEX", "LOAD", "IMPORT",
    "FLUSH", "OPTIMIZE", "REPAIR", "CHECKSUM", "BEGIN", "START", "COMMIT",
    "ROLLBACK", "SAVEPOINT", "RENAME", "COMMENT", "HANDLER", "LOCK", "UNLOCK",
)

_SHOW_TARGETS = (
    r"TABLES|DATABASES|SCHEMAS|COLUMNS|INDEX|INDEXES|INDICES|STATUS|VARIABLES"
    r"|PROCESSLIST|FULL\s+PROCESSLIST|ENGINES|STORAGE\s+ENGINES|CHARSET"
    r"|CHARACTER\s+SET|COLLATION|CREATE\s+TABLE|CREATE\s+DATABASE|CREATE\s+SCHEMA"
    r"|CREATE\s+VIEW|TABLE\s+STATUS|FULL\s+TABLES|FULL\s+COLUMNS|GRANTS|PRIVILEGES"
)

_INTROSPECTION = "introspection"

READ_ONLY_RULES: tuple[Rule, ...] = (
    _rule(
        "system_catalog",
        _INTROSPECTION,
        r"^SELECT\s",
        r"\bFROM\s+(?:(?:INFORMATION_SCHEMA|PERFORMANCE_SCHEMA|MYSQL|PG_CATALOG)\.\w+|PG_\w+)",
    ),
    _rule("select", "read", r"^SELECT\b"),
    _rule("show", _INTROSPECTION, rf"^SHOW\s+(?:{_SHOW_TARGETS})\b"),
    _rule("describe", _INTROSPECTION, r"^DESC(?:RIBE)?\b"),
    _rule("explain", _INTROSPECTION, r"^EXPLAIN\b"),
    # psql meta-commands
    _rule("meta_list_tables", _INTROSPECTION, r"^\\DT\+?$"),
    _rule("meta_describe", _INTROSPECTION, r"^\\D\+?\s+[\w.]+$"),
    _rule("meta_list_databases", _INTROSPECTION, r"^\\L\+?$"),
    _rule("meta_list_schemas", _INTROSPECTION, r"^\\DN\+?$"),
    _rule("meta_list_functions", _INTROSPECTION, r"^\\DF\+?$"),
    _rule("meta_list_views", _INTROSPECTION, r"^\\DV\+?$"),
    _rule("meta_list_indexes", _INTROSPECTION, r"^\\DI\+?$"),
    _rule("meta_list_users", _INTROSPECTION, r"^\\DU\+?$"),
    _rule("meta_list_privileges", _INTROSPECTION, r"^\\(?:DP|Z)$"),
    _rule("meta_timing", _INTROSPECTION, r"^\\TIMING(?:\s+(?:ON|OFF))?$"),
    _rule(
        "cte_select",
        "read",
        r"^WITH\b",
        r"\bSELECT\b",
        forbidden=rf"\b(?:{'|'.join(CTE_DENY_KEYWORDS)})\b",
    ),
)
