# askdb/db.py

import re
from enum import Enum

from pydantic import BaseModel, ConfigDict
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from .config import Settings, settings
from .errors import DatabaseExecutionError
from .logger import get_logger

logger = get_logger(__name__)

# Same shape SQLAlchemy uses to spot ":name" bind parameters in text().
_BIND_PARAM = re.compile(r"(?<![:\w\\]):(\w+)(?!:)", re.UNICODE)


class Dialect(str, Enum):
    MYSQL = "MySQL"
    POSTGRESQL = "PostgreSQL"
    SQLITE = "SQLite"
    SQLSERVER = "SQLServer"
    ORACLE = "Oracle"

    @classmethod
    def from_sqlalchemy(cls, name: str) -> "Dialect":
        try:
            return _SQLALCHEMY_DIALECTS[name]
        except KeyError:
            raise ValueError(f"Unsupported database dialect: {name}") from None

    @property
    def sqlglot(self) -> str:
        return _SQLGLOT_DIALECTS[self]


_SQLALCHEMY_DIALECTS = {
    "mysql": Dialect.MYSQL,
    "mariadb": Dialect.MYSQL,
    "postgresql": Dialect.POSTGRESQL,
    "sqlite": Dialect.SQLITE,
    "mssql": Dialect.SQLSERVER,
    "oracle": Dialect.ORACLE,
}

_SQLGLOT_DIALECTS = {
    Dialect.MYSQL: "mysql",
    Dialect.POSTGRESQL: "postgres",
    Dialect.SQLITE: "sqlite",
    Dialect.SQLSERVER: "tsql",
    Dialect.ORACLE: "oracle",
}


class ColumnDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str


class TableDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    columns: tuple[ColumnDescriptor, ...] = ()


def raw_query(query: str):
    """
    Wraps generated SQL as a raw text clause. Colons that would read as
    bind parameters are escaped; SQLAlchemy handles '%' for pyformat drivers.
    """
    return text(_BIND_PARAM.sub(r"\\:\1", query))


class Database:
    """
    The configured database connection: schema listing, raw reads and the dialect.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self.dialect = Dialect.from_sqlalchemy(engine.dialect.name)

    @classmethod
    def from_settings(cls, config: Settings = settings, connection: str | None = None) -> "Database":
        url = config.connection_url(connection)
        return cls(create_engine(url, pool_pre_ping=True))

    def list_tables(self) -> list[TableDescriptor]:
        """
        Returns every table and view with its columns, tables first, each group sorted by name.
        """
        insp = inspect(self.engine)
        names = sorted(insp.get_table_names()) + sorted(insp.get_view_names())

        tables = []
        for name in names:
            cols = tuple(
                ColumnDescriptor(name=c["name"], type=str(c["type"]))
                for c in insp.get_columns(name)
            )
            tables.append(TableDescriptor(name=name, columns=cols))
        logger.debug("Listed %d tables from %s", len(tables), self.dialect.value)
        return tables

    def execute(self, query: str) -> list[dict] | None:
        """
        Runs the query on a connection that is never committed.
        Returns rows as dicts, or None when there are no rows.
        """
        try:
            with self.engine.connect() as conn:
                result = conn.execute(raw_query(query))
                if not result.returns_rows:
                    return None
                rows = [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            raise DatabaseExecutionError(query, str(getattr(e, "orig", None) or e)) from e
        return rows or None
