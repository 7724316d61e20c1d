"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI opens it in the app lifespan
and closes it on shutdown (see `api/main.py`). Every helper borrows a pooled
connection for a single statement; there are no multi-statement transactions.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import config

_pool: asyncpg.Pool | None = None


def _strip_sslmode(dsn: str) -> str:
    # libpq-style `sslmode` is not an asyncpg connect() keyword.
    parts = urlsplit(dsn)
    kept = [pair for pair in parse_qsl(parts.query, keep_blank_values=True) if pair[0] != "sslmode"]
    return urlunsplit(parts._replace(query=urlencode(kept))) if parts.query else dsn


def database_url() -> str:
    dsn = config.env_str("DATABASE_URL", "")
    if not dsn:
        raise RuntimeError("DATABASE_URL is not set; expected a postgresql:// DSN.")
    return _strip_sslmode(dsn)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=config.db_pool_min_size(),
        max_size=config.db_pool_max_size(),
        command_timeout=config.db_command_timeout(),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    First row of `sql` as a plain dict, or None when nothing matched.
    """
    row = await pool().fetchrow(sql, *args)
    return None if row is None else dict(row)


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    rows = await pool().fetch(sql, *args)
    return [dict(row) for row in rows]


async def fetch_val(sql: str, *args: Any) -> Any:
    """
    Single scalar (first column of the first row), e.g. `count(*)`.
    """
    return await pool().fetchval(sql, *args)


async def execute(sql: str, *args: Any) -> None:
    # Status string ("INSERT 0 1") is not useful to callers.
    await pool().execute(sql, *args)
