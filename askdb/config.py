from pydantic import BaseModel, ConfigDict
from dotenv import load_dotenv
import os
from typing import Literal

# Load environment variables from .env file
load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # Env-derived defaults are checked at startup, not on first use.
    model_config = ConfigDict(validate_default=True)

    # Database
    db_connection: str = os.getenv("DB_CONNECTION", "mysql")
    db_host: str = os.getenv("DB_HOST", "127.0.0.1")
    db_port: int = int(os.getenv("DB_PORT", "0"))
    db_user: str = os.getenv("DB_USER", "nl2sql_app")
    db_pass: str = os.getenv("DB_PASS", "")
    db_name: str = os.getenv("DB_NAME", "shopdb")
    sqlite_path: str = os.getenv("SQLITE_PATH", "askdb.sqlite")
    database_url: str = os.getenv("DATABASE_URL", "")

    # Query safety
    strict_mode: bool = _flag("STRICT_MODE", "false")
    keyword_match: Literal["word", "substring"] = os.getenv("KEYWORD_MATCH", "word").strip().lower()
    strict_statement_check: bool = _flag("STRICT_STATEMENT_CHECK", "false")

    # Schema lookup
    max_tables_before_lookup: int = int(os.getenv("MAX_TABLES_BEFORE_LOOKUP", "15"))

    # LLM (Ollama runtime)
    ollama_url: str = os.getenv("OLLAMA_URL", "http://127.0.0.1:11434")
    ollama_model: str = os.getenv("OLLAMA_MODEL", "mistral")
    llm_timeout: float = float(os.getenv("LLM_TIMEOUT", "60"))
    llm_forward_stop: bool = _flag("LLM_FORWARD_STOP", "false")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_json: bool = _flag("LOG_JSON", "false")

    def connection_url(self, name: str | None = None) -> str:
        """
        Resolves a named connection to a SQLAlchemy URL.
        Names: mysql, pgsql, sqlite, sqlsrv, or url (taken from DATABASE_URL).
        """
        name = (name or self.db_connection).lower()
        host = self.db_host
        if self.db_port:
            host = f"{host}:{self.db_port}"
        credentials = f"{self.db_user}:{self.db_pass}@{host}"

        if name == "mysql":
            return f"mysql+mysqlconnector://{credentials}/{self.db_name}?charset=utf8mb4"
        if name == "pgsql":
            return f"postgresql://{credentials}/{self.db_name}"
        if name == "sqlsrv":
            return f"mssql+pyodbc://{credentials}/{self.db_name}"
        if name == "sqlite":
            return f"sqlite:///{self.sqlite_path}"
        if name == "url":
            if not self.database_url:
                raise ValueError("DB_CONNECTION=url requires DATABASE_URL to be set.")
            return self.database_url
        raise ValueError(f"Unknown database connection: {name}")


# Create a global settings object
settings = Settings()
