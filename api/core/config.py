"""
Environment-backed settings.

Values are read lazily (on each call) so tests can monkeypatch `os.environ`
without reloading modules.
"""

from __future__ import annotations

import os

DEFAULT_LISTEN_ADDRESS = "0.0.0.0:80"


def env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def env_str(name: str, default: str) -> str:
    return os.environ.get(name, default).strip() or default


def listen_address() -> tuple[str, int]:
    """
    Parse `URL_API` ("host:port") into a (host, port) pair.
    """
    raw = env_str("URL_API", DEFAULT_LISTEN_ADDRESS)
    host, sep, port = raw.rpartition(":")
    if not sep or not port.isdigit():
        raise RuntimeError(f"URL_API must look like host:port, got {raw!r}.")
    return host or "0.0.0.0", int(port)


def db_pool_min_size() -> int:
    return max(1, env_int("DB_POOL_MIN_SIZE", 1))


def db_pool_max_size() -> int:
    return max(db_pool_min_size(), env_int("DB_POOL_MAX_SIZE", 10))


def db_command_timeout() -> int:
    return env_int("DB_COMMAND_TIMEOUT", 30)


def log_level() -> str:
    return env_str("LOG_LEVEL", "INFO").upper()


def empty_search_policy() -> str:
    return env_str("EMPTY_SEARCH_POLICY", "empty_list").lower()
