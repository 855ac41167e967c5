# askdb/nl2sql.py

from .config import Settings, settings
from .errors import ModelCallError
from .llm import CompletionClient
from .logger import get_logger
from .prompt import build_query_prompt
from .schema import SchemaCache, SchemaIntrospector
from .text import strip_quotes
from .validate import ensure_safe

logger = get_logger(__name__)


def parse_completion(completion: str) -> str:
    """
    Extracts the SQL from a raw completion. The prompt ends on an open
    `SQLQuery: "`, so the model writes the query and then two more lines
    (SQLResult and Answer). Those last two lines are dropped.
    """
    lines = completion.split("\n")
    sql = " ".join(lines[:-2])
    return strip_quotes(sql)


class QueryGenerator:
    def __init__(self, introspector: SchemaIntrospector, llm: CompletionClient, config: Settings = settings):
        self.introspector = introspector
        self.llm = llm
        self.config = config

    def get_query(self, question: str, cache: SchemaCache | None = None) -> str:
        """
        Asks the model for SQL answering `question` and validates it.
        Raises ModelCallError when no query can be extracted and
        UnsafeQueryError when strict mode rejects it.
        """
        dialect = self.introspector.database.dialect
        tables = self.introspector.list_tables(question, cache)
        prompt = build_query_prompt(question, tables, dialect)

        completion = self.llm.complete(prompt, "\n", 0.0)
        query = parse_completion(completion)
        if not query:
            raise ModelCallError(f"Could not extract a query from the model response: {completion!r}")
        logger.info("Generated query: %s", query)

        ensure_safe(
            query,
            strict_mode=self.config.strict_mode,
            keyword_match=self.config.keyword_match,
            statement_check=self.config.strict_statement_check,
            dialect=dialect,
        )
        return query
