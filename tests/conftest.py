import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from askdb.config import Settings
from fakes import FakeDatabase, table

USERS = table("users", "id", "name", "created_at")
ORDERS = table("orders", "id", "user_id", "amount_paid", "status")


@pytest.fixture
def settings():
    return Settings(strict_mode=True, keyword_match="word", strict_statement_check=False, max_tables_before_lookup=15)


@pytest.fixture
def fake_db():
    return FakeDatabase(tables=[USERS, ORDERS], rows=[{"count": 42}])


@pytest.fixture
def sqlite_engine():
    # One shared in-memory connection, usable from TestClient threads.
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    with engine.begin() as conn:
        conn.exec_driver_sql("CREATE TABLE users (id INTEGER PRIMARY KEY, name VARCHAR(50), created_at DATE)")
        conn.exec_driver_sql("CREATE TABLE orders (id INTEGER PRIMARY KEY, user_id INTEGER, amount_paid NUMERIC)")
        conn.exec_driver_sql("CREATE VIEW big_orders AS SELECT * FROM orders WHERE amount_paid > 100")
        conn.exec_driver_sql(
            "INSERT INTO users (id, name, created_at) VALUES "
            "(1, 'Ada', '2024-01-03'), (2, 'Linus', '2023-12-30'), (3, 'Grace', '2024-01-15')"
        )
        conn.exec_driver_sql("INSERT INTO orders (id, user_id, amount_paid) VALUES (1, 1, 250), (2, 3, 20)")
    yield engine
    engine.dispose()
