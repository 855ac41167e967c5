# askdb/executor.py

import json
from dataclasses import dataclass

from .db import Database
from .logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class QueryResult:
    """Rows returned by a query; `rows` is None when there were none."""

    rows: list[dict] | None = None

    @property
    def is_empty(self) -> bool:
        return self.rows is None

    def to_json(self) -> str:
        # No rows encode as an object, not an array.
        if self.rows is None:
            return "{}"
        return json.dumps(self.rows, default=str)


class QueryExecutor:
    def __init__(self, database: Database):
        self.database = database

    def execute(self, query: str) -> QueryResult:
        rows = self.database.execute(query)
        logger.info("Query returned %d rows", len(rows) if rows else 0)
        return QueryResult(rows or None)
