"""MySQL dialect."""

from typing import Any

from lazymethod.config import ConnectionConfig
from lazymethod.dialects.base import Dialect


class MySQLDialect(Dialect):
    """MySQL/MariaDB through PyMySQL.

    ``LIMIT ?, ?`` placeholders only work when the values are sent as
    integers, so ``limit_`` arguments are coerced. String literals may
    escape quotes with a backslash.
    """

    name = "mysql"
    driver = "pymysql"
    supports_last_insert_id = True
    typed_limit_args = True
    backslash_escapes = True

    def connect_kwargs(self, config: ConnectionConfig) -> dict[str, Any]:
        kwargs = super().connect_kwargs(config)
        kwargs.setdefault("autocommit", True)
        return kwargs
