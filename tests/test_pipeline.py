import pytest

from askdb.db import Database
from askdb.errors import DatabaseExecutionError, ModelCallError, UnsafeQueryError
from askdb.pipeline import AskPipeline
from fakes import FakeDatabase, FakeLLM, completion, table

COUNT_SQL = "SELECT COUNT(*) FROM users WHERE created_at >= '2024-01-01'"


def test_ask_end_to_end(fake_db, settings):
    llm = FakeLLM(completion(COUNT_SQL), '"42 users signed up this month."\n')
    pipeline = AskPipeline(fake_db, llm, settings)

    result = pipeline.ask("How many users signed up this month?")

    assert result.query == COUNT_SQL
    assert result.result == '[{"count": 42}]'
    assert result.answer == "42 users signed up this month."
    assert result.prompt == llm.calls[1]["prompt"]
    assert result.prompt.endswith('Answer: "')
    assert f'SQLQuery: "{COUNT_SQL}"' in result.prompt
    assert fake_db.executed == [COUNT_SQL]
    assert [c["temperature"] for c in llm.calls] == [0.0, 0.7]


def test_unsafe_query_never_reaches_the_database(fake_db, settings):
    llm = FakeLLM(completion("DROP TABLE users"))
    pipeline = AskPipeline(fake_db, llm, settings)

    with pytest.raises(UnsafeQueryError):
        pipeline.ask("Drop everything")

    assert fake_db.executed == []
    assert len(llm.calls) == 1


def test_empty_result_is_an_object(settings):
    db = FakeDatabase(tables=[table("users", "id")], rows=None)
    llm = FakeLLM(completion("SELECT id FROM users WHERE 0"), "Nobody.")

    result = AskPipeline(db, llm, settings).ask("Who?")

    assert result.result == "{}"
    assert 'SQLResult: "{}"' in result.prompt


def test_schema_listed_once_per_ask(fake_db, settings):
    llm = FakeLLM(completion("SELECT 1"), "one", completion("SELECT 2"), "two")
    pipeline = AskPipeline(fake_db, llm, settings)

    pipeline.ask("first")
    assert fake_db.list_calls == 1

    pipeline.ask("second")
    assert fake_db.list_calls == 2


def test_table_lookup_happens_once_per_ask(fake_db, settings):
    settings.max_tables_before_lookup = 2
    llm = FakeLLM("users", completion("SELECT COUNT(*) FROM users"), "Two.")

    result = AskPipeline(fake_db, llm, settings).ask("How many users?")

    assert len(llm.calls) == 3
    assert '"orders"' not in llm.calls[1]["prompt"]
    assert '"users" has columns' in result.prompt
    assert fake_db.list_calls == 1


def test_database_errors_abort(settings):
    db = FakeDatabase(tables=[table("users", "id")], rows=DatabaseExecutionError("SELECT x", "no such column: x"))
    llm = FakeLLM(completion("SELECT x FROM users"))

    with pytest.raises(DatabaseExecutionError):
        AskPipeline(db, llm, settings).ask("x?")
    assert len(llm.calls) == 1


def test_answer_model_errors_abort(fake_db, settings):
    llm = FakeLLM(completion("SELECT 1"), ModelCallError("timeout"))

    with pytest.raises(ModelCallError):
        AskPipeline(fake_db, llm, settings).ask("q")


def test_blank_question(fake_db, settings):
    pipeline = AskPipeline(fake_db, FakeLLM(), settings)
    with pytest.raises(ValueError):
        pipeline.ask("   ")
    with pytest.raises(ValueError):
        pipeline.get_query("")


def test_get_query_only_generates(fake_db, settings):
    llm = FakeLLM(completion("SELECT name FROM users"))

    assert AskPipeline(fake_db, llm, settings).get_query("Names?") == "SELECT name FROM users"
    assert fake_db.executed == []


def test_ask_against_sqlite(sqlite_engine, settings):
    settings.strict_statement_check = True
    llm = FakeLLM(completion(COUNT_SQL.replace("COUNT(*)", "COUNT(*) AS signups")), "2 users signed up.")

    result = AskPipeline(Database(sqlite_engine), llm, settings).ask("How many users signed up this month?")

    assert result.result == '[{"signups": 2}]'
    assert "correct SQLite query" in llm.calls[0]["prompt"]
    assert result.answer == "2 users signed up."


def test_answer_stops_at_first_newline(fake_db, settings):
    llm = FakeLLM(completion(COUNT_SQL), '42 users."\nQuestion: "Next?"\nSQLQuery: "SELECT 1')

    result = AskPipeline(fake_db, llm, settings).ask("How many users signed up this month?")

    assert result.answer == "42 users."
    assert llm.calls[1]["stop"] == "\n"
