# askdb/pipeline.py

from pydantic import BaseModel

from .answer import AnswerSynthesizer
from .config import Settings, settings
from .db import Database
from .executor import QueryExecutor
from .llm import CompletionClient
from .logger import get_logger
from .nl2sql import QueryGenerator
from .schema import SchemaCache, SchemaIntrospector

logger = get_logger(__name__)


class AskResult(BaseModel):
    query: str
    result: str
    prompt: str
    answer: str


class AskPipeline:
    """
    Question -> SQL -> rows -> answer.

    Each ask() runs every stage once, in order, with its own SchemaCache.
    Errors from any stage propagate; nothing is retried.
    """

    def __init__(self, database: Database, llm: CompletionClient, config: Settings = settings):
        self.config = config
        self.introspector = SchemaIntrospector(database, llm, config)
        self.generator = QueryGenerator(self.introspector, llm, config)
        self.executor = QueryExecutor(database)
        self.synthesizer = AnswerSynthesizer(self.introspector, llm)

    def ask(self, question: str) -> AskResult:
        question = _require_question(question)
        cache = SchemaCache()

        query = self.generator.get_query(question, cache)
        result = self.executor.execute(query).to_json()
        answer, prompt = self.synthesizer.synthesize(question, query, result, cache)
        logger.info("Answered %r", question)

        return AskResult(query=query, result=result, prompt=prompt, answer=answer)

    def get_query(self, question: str) -> str:
        return self.generator.get_query(_require_question(question))


def _require_question(question: str) -> str:
    if not question or not question.strip():
        raise ValueError("Empty question.")
    return question
