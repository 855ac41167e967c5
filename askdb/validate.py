# askdb/validate.py
import re

import sqlglot
from sqlglot import exp
from sqlglot.errors import SqlglotError

from .db import Dialect
from .errors import UnsafeQueryError

FORBIDDEN_WORDS = ("insert", "update", "delete", "alter", "drop", "truncate", "create", "replace")
# Only letters and "_" join a keyword to its neighbours: "created_at" passes,
# "/*!50000DROP*/" (a MySQL versioned comment) does not.
FORBIDDEN_PATTERN = re.compile(r"(?<![a-z_])(" + "|".join(FORBIDDEN_WORDS) + r")(?![a-z_])")

READ_ONLY_STATEMENTS = (exp.Select, exp.Union, exp.Intersect, exp.Except)
WRITE_NODES = (exp.Insert, exp.Update, exp.Delete, exp.Drop, exp.Create, exp.Command)


def _contains_forbidden(sql_lower: str, keyword_match: str) -> str | None:
    if keyword_match == "substring":
        # "updates_log" and "created_at" are rejected in this mode.
        for word in FORBIDDEN_WORDS:
            if word in sql_lower:
                return word
        return None
    if keyword_match == "word":
        m = FORBIDDEN_PATTERN.search(sql_lower)
        return m.group(1) if m else None
    raise ValueError(f"Unknown keyword_match mode: {keyword_match}")


def _read_only_problem(sql: str, dialect: Dialect | None) -> str | None:
    try:
        statements = [s for s in sqlglot.parse(sql, read=dialect.sqlglot if dialect else None) if s is not None]
    except SqlglotError as e:
        return f"unparseable query: {e}"

    if len(statements) != 1:
        return f"expected a single statement, got {len(statements)}"
    stmt = statements[0]
    if not isinstance(stmt, READ_ONLY_STATEMENTS):
        return f"{stmt.key.upper()} statements are not read-only"
    if stmt.find(*WRITE_NODES):
        return "query embeds a write statement"
    return None


def ensure_safe(
    query: str,
    strict_mode: bool,
    keyword_match: str = "word",
    statement_check: bool = False,
    dialect: Dialect | None = None,
):
    """
    Raises UnsafeQueryError when strict mode is on and the lower-cased query
    contains a forbidden keyword, either as a whole word (`keyword_match="word"`,
    where only letters and underscores count as part of a word)
    or anywhere at all (`keyword_match="substring"`). With `statement_check` the
    query must also parse as one read-only statement.
    Does nothing when strict mode is off.
    """
    if not strict_mode:
        return

    word = _contains_forbidden(query.lower(), keyword_match)
    if word:
        raise UnsafeQueryError.from_query(query, f"forbidden keyword: {word}")

    if statement_check:
        problem = _read_only_problem(query, dialect)
        if problem:
            raise UnsafeQueryError.from_query(query, problem)
