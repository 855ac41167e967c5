# askdb/schema.py

from .config import Settings, settings
from .db import Database, TableDescriptor
from .llm import CompletionClient
from .logger import get_logger
from .prompt import build_table_filter_prompt
from .text import cut_at_stop

logger = get_logger(__name__)


class SchemaCache:
    """
    Schema snapshots memoized for a single ask() call, keyed by question.
    Create one per invocation; never share it between invocations.
    """

    def __init__(self):
        self._snapshots: dict[str, list[TableDescriptor]] = {}

    def get(self, question: str) -> list[TableDescriptor] | None:
        return self._snapshots.get(question)

    def put(self, question: str, tables: list[TableDescriptor]):
        self._snapshots[question] = tables

    def __contains__(self, question: str) -> bool:
        return question in self._snapshots


def parse_table_names(completion: str) -> list[str]:
    """
    Splits a comma separated model answer into table names.
    Example: " users, Orders ,," -> ["users", "Orders"]
    """
    return [name.strip() for name in completion.split(",") if name.strip()]


def match_tables(tables: list[TableDescriptor], names: list[str]) -> list[TableDescriptor]:
    wanted = {n.lower() for n in names}
    return [t for t in tables if t.name.lower() in wanted]


class SchemaIntrospector:
    def __init__(self, database: Database, llm: CompletionClient, config: Settings = settings):
        self.database = database
        self.llm = llm
        self.config = config

    def list_tables(self, question: str, cache: SchemaCache | None = None) -> list[TableDescriptor]:
        """
        Returns the tables visible to query generation for this question.
        Large schemas are narrowed down by asking the model which tables matter.
        """
        cache = cache if cache is not None else SchemaCache()
        if question in cache:
            return cache.get(question)

        tables = self.database.list_tables()
        if len(tables) >= self.config.max_tables_before_lookup:
            tables = self.filter_matching_tables(question, tables)

        cache.put(question, tables)
        return tables

    def filter_matching_tables(self, question: str, tables: list[TableDescriptor]) -> list[TableDescriptor]:
        prompt = build_table_filter_prompt(question, tables)
        completion = cut_at_stop(self.llm.complete(prompt, "\n", 0.0).lstrip(), "\n")
        names = parse_table_names(completion)

        matching = match_tables(tables, names)
        logger.info("Table lookup kept %d of %d tables: %s", len(matching), len(tables), [t.name for t in matching])
        if not matching:
            logger.warning("Model named no known tables (%r); continuing with an empty schema", completion)
        return matching
