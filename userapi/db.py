# userapi/db.py
from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

import yaml
from fastapi import Request

# DB path resolution order:
# 1) USERS_DB_PATH env var (highest priority)
# 2) config.yaml test_db_path (when running under tests)
# 3) config.yaml db_path
# 4) fallback: users.db at the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "users.db")

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


def _read_config_yaml() -> dict:
    cfg_path = os.environ.get("USERS_API_CONFIG") or os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(cfg, dict):
        return {}
    out = {}
    for k in ("db_path", "test_db_path", "host"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    port = cfg.get("port")
    if isinstance(port, int):
        out["port"] = port
    return out


def get_db_path(override: str | None = None) -> str:
    if override:
        path = override
    else:
        env_path = os.environ.get("USERS_DB_PATH")
        cfg = _read_config_yaml()
        is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

        if env_path:
            path = env_path
        elif is_test and cfg.get("test_db_path"):
            path = os.path.join(_PROJECT_ROOT, cfg["test_db_path"])
        elif cfg.get("db_path"):
            path = os.path.join(_PROJECT_ROOT, cfg["db_path"])
        else:
            path = _ROOT_DB

    if path != ":memory:":
        dirn = os.path.dirname(path) or "."
        os.makedirs(dirn, exist_ok=True)
    return path


def get_server_address() -> tuple[str, int]:
    cfg = _read_config_yaml()
    host = os.environ.get("USERS_API_HOST") or cfg.get("host") or DEFAULT_HOST
    raw_port = os.environ.get("USERS_API_PORT", "").strip()
    try:
        port = int(raw_port) if raw_port else int(cfg.get("port", DEFAULT_PORT))
    except ValueError:
        port = DEFAULT_PORT
    return host, port


def connect(db_path: str | None = None) -> sqlite3.Connection:
    """
    Open a SQLite connection.

    Autocommit (isolation_level=None) so every statement stands alone.
    check_same_thread=False lets the threadpool close a connection that was
    opened on another worker thread.
    """
    path = get_db_path(db_path)
    conn = sqlite3.connect(
        path,
        timeout=30,
        check_same_thread=False,
        isolation_level=None,
    )
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    One connection per unit of work.

    lastrowid / rowcount are per connection, so a connection must never be
    shared between concurrent requests.
    """
    conn = connect(db_path)
    try:
        yield conn
    finally:
        conn.close()


def get_db(request: Request) -> Iterator[sqlite3.Connection]:
    """FastAPI dependency: a fresh connection to the DB resolved at startup."""
    path = getattr(request.app.state, "db_path", None)
    if path is None:
        raise RuntimeError("DB path is not initialized. Is the app lifespan running?")
    with get_conn(path) as conn:
        yield conn
