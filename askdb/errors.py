# askdb/errors.py


class AskDatabaseError(Exception):
    """Base class for every error the pipeline raises."""


class UnsafeQueryError(AskDatabaseError):
    """The generated query was rejected by strict-mode validation."""

    def __init__(self, query: str, reason: str | None = None):
        self.query = query
        self.reason = reason
        message = f"The generated query is potentially unsafe: {query}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)

    @classmethod
    def from_query(cls, query: str, reason: str | None = None) -> "UnsafeQueryError":
        return cls(query, reason)


class ModelCallError(AskDatabaseError):
    """The language model failed or returned something unusable."""


class DatabaseExecutionError(AskDatabaseError):
    """The generated query failed to run against the database."""

    def __init__(self, query: str, message: str):
        self.query = query
        super().__init__(message)
