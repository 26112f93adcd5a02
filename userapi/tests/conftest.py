import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "users_test.db"
    # Point the app to this temp DB
    os.environ["USERS_DB_PATH"] = str(path)
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    from fastapi.testclient import TestClient
    from userapi.api import create_app
    # Context manager runs the lifespan (opens DB, creates tables)
    with TestClient(create_app(tmp_db_path)) as c:
        yield c


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("USERS_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in ("users", "operation_log", "sqlite_sequence"):
            try:
                conn.execute(f"DELETE FROM {t}")
            except sqlite3.OperationalError:
                pass
        conn.commit()
    finally:
        conn.close()
    yield


@pytest.fixture()
def mem_conn():
    from userapi.db import connect
    from userapi.repository import user_repo
    from userapi.logs import ensure_log_schema
    conn = connect(":memory:")
    user_repo.ensure_schema(conn)
    ensure_log_schema(conn)
    try:
        yield conn
    finally:
        conn.close()
