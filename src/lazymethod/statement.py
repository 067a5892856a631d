"""Prepared statements cached per accessor method."""

from collections.abc import Sequence
from typing import Any

from lazymethod.dialects.base import Dialect
from lazymethod.protocols.dbapi import DBAPIConnection, DBAPICursor


class PreparedStatement:
    """Driver-ready SQL bound to a cursor that lives as long as the statement.

    DB-API has no portable prepare call. The SQL is converted once and the
    same text is re-executed, which hits sqlite3's per-connection statement
    cache.
    """

    def __init__(self, method: str, sql: str, cursor: DBAPICursor) -> None:
        self.method = method
        self.sql = sql
        self.cursor = cursor
        self.closed = False

    @classmethod
    def prepare(
        cls,
        method: str,
        template: str,
        connection: DBAPIConnection,
        dialect: Dialect,
    ) -> "PreparedStatement":
        """Translate the template for the dialect and open its cursor."""
        sql = dialect.prepare_sql(template)
        return cls(method, sql, dialect.cursor(connection))

    def execute(self, values: Sequence[Any]) -> DBAPICursor:
        """Execute with positional values and return the cursor."""
        self.cursor.execute(self.sql, tuple(values))
        return self.cursor

    def close(self) -> None:
        """Finalize the statement. Safe to call twice."""
        if self.closed:
            return
        self.closed = True
        self.cursor.close()
