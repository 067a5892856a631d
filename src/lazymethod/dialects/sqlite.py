"""SQLite dialect."""

from typing import Any

from lazymethod.config import ConnectionConfig
from lazymethod.dialects.base import Dialect


class SQLiteDialect(Dialect):
    """SQLite through the standard library ``sqlite3`` module.

    Connections default to autocommit (``isolation_level=None``) unless
    the options say otherwise.
    """

    name = "sqlite"
    driver = "sqlite3"
    supports_last_insert_id = True

    def connect_kwargs(self, config: ConnectionConfig) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "database": config.database or ":memory:",
            "isolation_level": None,
        }
        kwargs.update(config.options)
        return kwargs
