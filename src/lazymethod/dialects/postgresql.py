"""PostgreSQL dialect."""

from typing import Any

from lazymethod.config import ConnectionConfig
from lazymethod.dialects.base import Dialect
from lazymethod.protocols.dbapi import DBAPIConnection


class PostgreSQLDialect(Dialect):
    """PostgreSQL through psycopg2.

    psycopg2 has no usable ``lastrowid``; use ``INSERT ... RETURNING id``
    with a row shape instead of LAST_INSERT_ID.
    """

    name = "postgresql"
    driver = "psycopg2"

    def connect_kwargs(self, config: ConnectionConfig) -> dict[str, Any]:
        kwargs = super().connect_kwargs(config)
        if "database" in kwargs:
            kwargs["dbname"] = kwargs.pop("database")
        return kwargs

    def connect(self, config: ConnectionConfig) -> DBAPIConnection:
        kwargs = self.connect_kwargs(config)
        autocommit = kwargs.pop("autocommit", True)
        conn = self.load_driver().connect(**kwargs)
        conn.autocommit = autocommit
        return conn
