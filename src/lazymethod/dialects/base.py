"""Base class for database dialects."""

import importlib
from types import ModuleType
from typing import Any

from lazymethod.config import ConnectionConfig
from lazymethod.exceptions import ConfigurationError
from lazymethod.protocols.dbapi import DBAPIConnection, DBAPICursor
from lazymethod.utils.placeholders import convert_placeholders

LIMIT_ARG_PREFIX = "limit_"


class Dialect:
    """A database product reached through a DB-API 2.0 driver.

    Subclasses name the driver module and declare capability flags that the
    registry and dispatcher consult instead of checking dialect names.
    """

    name: str = "generic"
    driver: str = ""
    # Driver reports the auto-generated key of the last INSERT
    supports_last_insert_id: bool = False
    # Positional LIMIT/OFFSET values must be bound as integers
    typed_limit_args: bool = False
    # Backslash escapes a quote inside string literals
    backslash_escapes: bool = False

    def __init__(self) -> None:
        self._module: ModuleType | None = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

    def load_driver(self) -> ModuleType:
        """Import the driver module on first use.

        Raises:
            ConfigurationError: If the driver is not installed
        """
        if self._module is None:
            try:
                self._module = importlib.import_module(self.driver)
            except ImportError as e:
                raise ConfigurationError(
                    f"Driver module '{self.driver}' for dialect '{self.name}' "
                    f"is not installed: {e}"
                ) from e
        return self._module

    @property
    def paramstyle(self) -> str:
        return getattr(self.load_driver(), "paramstyle", "qmark")

    def connect_kwargs(self, config: ConnectionConfig) -> dict[str, Any]:
        """Build the keyword arguments for the driver's connect()."""
        kwargs: dict[str, Any] = {}
        if config.database is not None:
            kwargs["database"] = config.database
        if config.host is not None:
            kwargs["host"] = config.host
        if config.port is not None:
            kwargs["port"] = config.port
        if config.user is not None:
            kwargs["user"] = config.user
        if config.password is not None:
            kwargs["password"] = config.password
        kwargs.update(config.options)
        return kwargs

    def connect(self, config: ConnectionConfig) -> DBAPIConnection:
        """Open a driver connection. Driver errors propagate unchanged."""
        return self.load_driver().connect(**self.connect_kwargs(config))

    def prepare_sql(self, sql: str) -> str:
        """Translate a ``?`` template into the driver's paramstyle."""
        return convert_placeholders(sql, self.paramstyle, self.backslash_escapes)

    def cursor(self, connection: DBAPIConnection) -> DBAPICursor:
        """Create the cursor a prepared statement keeps for its lifetime."""
        return connection.cursor()

    def bind_value(self, name: str, value: Any) -> Any:
        """Adapt one argument value before it is bound.

        Raises:
            ValueError: If a ``limit_`` value cannot be bound as an integer
        """
        if self.typed_limit_args and name.startswith(LIMIT_ARG_PREFIX) and value is not None:
            if isinstance(value, bool):
                raise ValueError(f"argument '{name}' must be an integer")
            try:
                return int(value)
            except (TypeError, ValueError):
                raise ValueError(f"argument '{name}' must be an integer, got {value!r}") from None
        return value

    def last_insert_id(self, cursor: DBAPICursor) -> Any:
        """Return the key generated by the last INSERT, or None."""
        return getattr(cursor, "lastrowid", None)
