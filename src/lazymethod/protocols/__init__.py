"""Protocol interfaces for the database drivers lazymethod wraps."""

from lazymethod.protocols.dbapi import DBAPIConnection, DBAPICursor

__all__ = [
    "DBAPIConnection",
    "DBAPICursor",
]
