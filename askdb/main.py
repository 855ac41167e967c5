# askdb/main.py
from functools import lru_cache

from fastapi import Depends, FastAPI, HTTPException
from pydantic import BaseModel

from .config import settings
from .db import Database
from .errors import DatabaseExecutionError, ModelCallError, UnsafeQueryError
from .llm import OllamaClient
from .logger import configure_logging
from .pipeline import AskPipeline, AskResult

configure_logging(settings.log_level, settings.log_json)

app = FastAPI(title="Ask Database")


class QueryIn(BaseModel):
    question: str


class QueryOut(BaseModel):
    sql: str


@lru_cache
def get_database() -> Database:
    return Database.from_settings(settings)


@lru_cache
def get_llm() -> OllamaClient:
    return OllamaClient(settings)


def get_pipeline() -> AskPipeline:
    return AskPipeline(get_database(), get_llm(), settings)


def _clean_question(q: QueryIn) -> str:
    question = q.question.strip()
    if not question:
        raise HTTPException(status_code=400, detail="Empty question.")
    return question


def _run(fn, question: str):
    try:
        return fn(question)
    except UnsafeQueryError as e:
        raise HTTPException(status_code=422, detail={"error": str(e), "sql": e.query})
    except DatabaseExecutionError as e:
        raise HTTPException(status_code=422, detail={"error": str(e), "sql": e.query})
    except ModelCallError as e:
        raise HTTPException(status_code=502, detail=str(e))


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/ask", response_model=AskResult)
def ask(q: QueryIn, pipeline: AskPipeline = Depends(get_pipeline)):
    return _run(pipeline.ask, _clean_question(q))


@app.post("/query", response_model=QueryOut)
def query(q: QueryIn, pipeline: AskPipeline = Depends(get_pipeline)):
    return {"sql": _run(pipeline.get_query, _clean_question(q))}
