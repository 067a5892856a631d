"""Built-in database dialects."""

from lazymethod.dialects.base import Dialect
from lazymethod.dialects.mysql import MySQLDialect
from lazymethod.dialects.postgresql import PostgreSQLDialect
from lazymethod.dialects.sqlite import SQLiteDialect

BUILTIN_DIALECTS: dict[str, type[Dialect]] = {
    "sqlite": SQLiteDialect,
    "mysql": MySQLDialect,
    "postgresql": PostgreSQLDialect,
}

__all__ = [
    "BUILTIN_DIALECTS",
    "Dialect",
    "MySQLDialect",
    "PostgreSQLDialect",
    "SQLiteDialect",
]
