# askdb/answer.py

from .llm import CompletionClient
from .prompt import build_query_prompt
from .schema import SchemaCache, SchemaIntrospector
from .text import cut_at_stop, strip_quotes

ANSWER_TEMPERATURE = 0.7
ANSWER_STOP = "\n"


class AnswerSynthesizer:
    def __init__(self, introspector: SchemaIntrospector, llm: CompletionClient):
        self.introspector = introspector
        self.llm = llm

    def synthesize(self, question: str, query: str, result: str, cache: SchemaCache | None = None) -> tuple[str, str]:
        """
        Returns (answer, prompt): the model's answer to `question` given the
        executed query and its JSON result, plus the prompt that produced it.
        """
        tables = self.introspector.list_tables(question, cache)
        prompt = build_query_prompt(question, tables, self.introspector.database.dialect, query, result)
        answer = self.llm.complete(prompt, ANSWER_STOP, ANSWER_TEMPERATURE)
        return strip_quotes(cut_at_stop(answer.lstrip(), ANSWER_STOP)), prompt
