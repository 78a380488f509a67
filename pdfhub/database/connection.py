from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from pdfhub.config.settings import Settings


def build_conninfo(settings: Settings) -> str:
    return (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )


class Database:
    """Owns the connection pool and hands out connections to repositories."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool: ConnectionPool | None = pool

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        """Open a connection pool from settings."""
        pool = ConnectionPool(
            build_conninfo(settings),
            min_size=1,
            max_size=settings.db_pool_max_size,
            open=True,
        )
        return cls(pool)

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection[Any], None, None]:
        """Yield a connection from the pool. Caller manages commit/rollback."""
        if self._pool is None:
            raise RuntimeError("Database is closed.")
        with self._pool.connection() as conn:
            yield conn

    def close(self) -> None:
        """Close the underlying connection pool."""
        if self._pool is not None:
            self._pool.close()
            self._pool = None
