"""
Async database access helpers (raw SQL) using asyncpg.

The FastAPI lifespan creates one pool per process and stores it on
`app.state.pool` (see `api/main.py`). Handlers receive it through the
`get_pool` dependency and borrow connections with `pooled_connection`.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

DEFAULT_POOL_MIN_SIZE = 1
DEFAULT_POOL_MAX_SIZE = 5
DEFAULT_COMMAND_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def pool_settings() -> dict[str, Any]:
    """
    Pool sizing and statement timeout from env.

    DB_COMMAND_TIMEOUT=0 leaves statements without a client-side timeout.
    """
    min_size = max(0, _env_int("DB_POOL_MIN_SIZE", DEFAULT_POOL_MIN_SIZE))
    max_size = max(1, _env_int("DB_POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE))
    command_timeout = _env_float("DB_COMMAND_TIMEOUT", DEFAULT_COMMAND_TIMEOUT)
    return {
        "min_size": min(min_size, max_size),
        "max_size": max_size,
        "command_timeout": command_timeout if command_timeout > 0 else None,
    }


async def create_pool() -> asyncpg.Pool:
    settings = pool_settings()
    pool = await asyncpg.create_pool(dsn=database_url(), **settings)
    logger.info(
        "db_pool_created min_size=%s max_size=%s command_timeout=%s",
        settings["min_size"],
        settings["max_size"],
        settings["command_timeout"],
    )
    return pool


async def close_pool(pool: asyncpg.Pool | None) -> None:
    if pool is None:
        return None
    await pool.close()
    logger.info("db_pool_closed")


def get_pool(request: Request) -> asyncpg.Pool:
    """
    FastAPI dependency returning the process-wide pool.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise RuntimeError("DB pool is not initialized. Create it in the app lifespan.")
    return pool


@asynccontextmanager
async def pooled_connection(pool: asyncpg.Pool, operation: str) -> AsyncIterator[asyncpg.Connection]:
    """
    Borrow one connection for a single statement.

    Errors raised while acquiring propagate. Errors raised inside the block
    are logged and suppressed, so the caller falls through and returns None.
    The connection goes back to the pool on every path, cancellation included.
    """
    async with pool.acquire() as conn:
        try:
            yield conn
        except Exception:
            logger.exception("statement_failed operation=%s", operation)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def command_ack(status: str, rows: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """
    Turn a PostgreSQL command tag ("UPDATE 1", "INSERT 0 1") into a JSON-able
    acknowledgment.
    """
    parts = (status or "").split()
    command = parts[0] if parts else ""
    row_count: int | None = None
    if len(parts) > 1 and parts[-1].isdigit():
        row_count = int(parts[-1])
    return {
        "command": command,
        "row_count": row_count,
        "rows": rows or [],
    }


async def fetch_all(conn: asyncpg.Connection, sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    rows = await conn.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def fetch_ack(conn: asyncpg.Connection, command: str, sql: str, *args: Any) -> dict[str, Any]:
    """
    Run a write statement with a RETURNING clause and acknowledge it with the
    returned rows.
    """
    rows = await fetch_all(conn, sql, *args)
    return command_ack(f"{command} {len(rows)}", rows)


async def execute_ack(conn: asyncpg.Connection, sql: str, *args: Any) -> dict[str, Any]:
    """
    Run a statement (INSERT/UPDATE/DELETE) and acknowledge it from its command tag.
    """
    status = await conn.execute(sql, *args)
    return command_ack(status)
