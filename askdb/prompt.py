# askdb/prompt.py

from typing import Iterable

from .db import Dialect, TableDescriptor

QUERY_INSTR = (
    "Given an input question, first create a syntactically correct {dialect} query to run, "
    "then look at the results of the query and return the answer.\n"
    "Use the following format:\n"
    "\n"
    'Question: "Question here"\n'
    'SQLQuery: "SQL Query to run"\n'
    'SQLResult: "Result of the SQLQuery"\n'
    'Answer: "Final answer here"\n'
)

TABLES_INSTR = (
    "Given the below input question and list of potential tables, "
    "output a comma separated list of the table names that may be necessary to answer this question."
)


def describe_table(table: TableDescriptor) -> str:
    cols = ", ".join(f"{c.name} ({c.type})" for c in table.columns)
    return f'"{table.name}" has columns: {cols}'


def build_query_prompt(
    question: str,
    tables: Iterable[TableDescriptor],
    dialect: Dialect,
    query: str | None = None,
    result: str | None = None,
) -> str:
    """
    Compose the query-generation prompt. With `query` and `result` given it becomes
    the answer prompt: the generated SQL and its JSON result are filled in and the
    model is left to complete the Answer line.
    """
    parts = [QUERY_INSTR.format(dialect=dialect.value), "Only use the following tables and columns:", ""]
    parts += [describe_table(t) for t in tables]
    parts += ["", f'Question: "{question}"']
    if query:
        parts.append(f'SQLQuery: "{query}"')
    else:
        parts.append('SQLQuery: "')
    if result:
        parts += [f'SQLResult: "{result}"', 'Answer: "']
    return "\n".join(parts).rstrip("\n")


def build_table_filter_prompt(question: str, tables: Iterable[TableDescriptor]) -> str:
    names = "".join(f"{t.name}," for t in tables)
    parts = [
        TABLES_INSTR,
        f"Question: {question}",
        f"Table Names: {names}",
        "Relevant Table Names:",
    ]
    return "\n".join(parts).rstrip("\n")
