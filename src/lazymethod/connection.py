"""Connection object exposing SQL templates as accessor methods."""

import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lazymethod.config import ConnectionConfig, LazyMethodConfig
from lazymethod.dialects.base import Dialect
from lazymethod.exceptions import ConfigurationError, DatabaseConnectionError, OperationError
from lazymethod.observability import (
    LogLevel,
    StructuredLogger,
    Timer,
    emit_counter,
    emit_timer,
    get_logger,
    invocation_scope,
)
from lazymethod.plugins import get_dialect
from lazymethod.protocols.dbapi import DBAPIConnection
from lazymethod.registry import MethodSpec, build_registry
from lazymethod.results import ROW_READERS, NoRowError, ResultShape
from lazymethod.statement import PreparedStatement


@dataclass
class ErrorState:
    """Outcome of the most recent operation on a connection."""

    is_error: bool = False
    message: str | None = None

    def clear(self) -> None:
        self.is_error = False
        self.message = None

    def record(self, message: str) -> None:
        self.is_error = True
        self.message = message


class LazyConnection:
    """A database connection with accessor methods defined by SQL templates.

    Each method is a SQL template with ``?`` placeholders, the ordered names
    of the arguments that fill them, and a result shape. Statements are
    prepared on first use and reused for the lifetime of the connection.

    Example:
        db = LazyConnection(
            "sqlite:///data/people.db",
            {
                "get_person": {
                    "sql": "SELECT * FROM people WHERE id = ?",
                    "args": ["id"],
                    "ret": ResultShape.ROW_AS_MAP,
                },
            },
        )
        person = db.invoke("get_person", id=42)
        if db.is_error():
            print(db.error_message)

    Failed invocations return None and record the failure; pass
    ``raise_errors=True`` to have OperationError raised as well.

    Not thread-safe: use one connection per thread. A connection that is
    garbage collected while open is closed then, but collection time is not
    guaranteed; call close() or use a with block.
    """

    def __init__(
        self,
        connection: ConnectionConfig | Mapping[str, Any] | str,
        methods: Mapping[str, Any],
        *,
        dialect: Dialect | None = None,
        logger: StructuredLogger | None = None,
        log_level: LogLevel = LogLevel.INFO,
        raise_errors: bool = False,
    ) -> None:
        """Validate the method definitions and connect.

        Args:
            connection: Connection descriptor, mapping or URL
            methods: Method name → {"sql", "args", "ret"} definitions
            dialect: Dialect override; looked up from ``connection.driver``
                when not given
            logger: Logger for warnings and errors
            log_level: Minimum level for the default logger
            raise_errors: Raise OperationError from invoke() on failure

        Raises:
            ConfigurationError: If a definition, the dialect or the driver
                is unusable
            DatabaseConnectionError: If the database cannot be reached
        """
        self.id = uuid.uuid4().hex[:12]
        self.logger = logger or get_logger(__name__, log_level, connection_id=self.id)
        self.raise_errors = raise_errors
        self.config = _coerce_connection_config(connection)
        self.dialect = dialect or get_dialect(self.config.driver)
        self.methods = build_registry(methods, self.dialect, self.logger)
        self.errors = ErrorState()
        self.closed = False

        self._statements: dict[str, PreparedStatement] = {}
        self._dbh: DBAPIConnection | None = self.connect()

    @classmethod
    def from_config(cls, config: LazyMethodConfig, **kwargs: Any) -> "LazyConnection":
        """Create a connection from a loaded configuration."""
        kwargs.setdefault("log_level", config.log_level)
        kwargs.setdefault("raise_errors", config.raise_errors)
        return cls(config.connection, config.methods, **kwargs)

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: Any) -> "LazyConnection":
        """Create a connection from a YAML or JSON configuration file."""
        return cls.from_config(LazyMethodConfig.from_file(path), **kwargs)

    def __repr__(self) -> str:
        state = "closed" if self.closed else "open"
        return f"<LazyConnection {self.id} {self.dialect.name} {state} methods={len(self.methods)}>"

    def __enter__(self) -> "LazyConnection":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def __del__(self) -> None:
        # __init__ may have failed before connecting
        if getattr(self, "_dbh", None) is not None and not getattr(self, "closed", True):
            self.close()

    # Error state

    def is_error(self) -> bool:
        """Whether the most recent operation failed."""
        return self.errors.is_error

    @property
    def error_message(self) -> str | None:
        """Message of the most recent failure, None after a success."""
        return self.errors.message

    def error(self, message: str, method: str | None = None) -> None:
        """Record a failure and log it."""
        self.errors.record(message)
        self.logger.error(message)
        emit_counter("lazymethod.invoke.errors", self._labels(method))

    def _labels(self, method: str | None) -> dict[str, Any]:
        return {"method": method or "", "connection_id": self.id}

    # Connection handling

    def connect(self) -> DBAPIConnection:
        """Open the driver connection.

        Raises:
            ConfigurationError: If the driver module is missing
            DatabaseConnectionError: If the driver refuses the connection
        """
        self.errors.clear()
        try:
            dbh = self.dialect.connect(self.config)
        except ConfigurationError:
            raise
        except Exception as e:
            self.errors.record(f"Connection failure [{e}]")
            raise DatabaseConnectionError(
                f"Cannot connect to {self.dialect.name} database: {e}"
            ) from e
        self.logger.debug(f"Connected to {self.dialect.name} database")
        return dbh

    def disconnect(self) -> None:
        """Close the driver connection. Failures are recorded, not raised."""
        dbh, self._dbh = self._dbh, None
        if dbh is None:
            return
        try:
            dbh.close()
        except Exception as e:
            self.errors.record(f"Disconnect failed [{e}]")
            self.logger.warning("Disconnect failed", error=e)
        else:
            self.logger.debug("Disconnected")

    def close(self) -> None:
        """Finalize every prepared statement, then disconnect.

        Failures are recorded in the error state, never raised.
        """
        if self.closed:
            return
        self.closed = True
        self.errors.clear()

        for name, statement in self._statements.items():
            with invocation_scope(name):
                try:
                    statement.close()
                except Exception as e:
                    self.errors.record(f"Finalizing statement for {name} failed [{e}]")
                    self.logger.warning("Finalizing statement failed", error=e)
                else:
                    self.logger.debug("Finalized statement")
        self._statements.clear()

        self.disconnect()

    # Dispatch

    def invoke(self, name: str, args: Mapping[str, Any] | None = None, /, **kwargs: Any) -> Any:
        """Run an accessor method.

        Args:
            name: Method name
            args: Argument name → value mapping
            **kwargs: More arguments, overriding ``args``

        Returns:
            The result in the method's declared shape, or None on failure

        Raises:
            OperationError: On failure, only when ``raise_errors`` is set
        """
        self.errors.clear()
        call_args = {**(args or {}), **kwargs}

        with invocation_scope(name):
            try:
                with Timer() as timer:
                    result = self._dispatch(name, call_args)
            except OperationError as e:
                self.error(str(e), method=name)
                if self.raise_errors:
                    raise
                return None

            self.logger.debug("Invoked", duration_ms=timer.duration_ms)
            emit_timer("lazymethod.invoke.duration_ms", timer.duration_ms, self._labels(name))
        return result

    def _dispatch(self, name: str, call_args: dict[str, Any]) -> Any:
        if self.closed or self._dbh is None:
            raise OperationError("Connection is closed", method=name)

        spec = self.methods.get(name)
        if spec is None:
            raise OperationError(f"No such method: {name}", method=name)

        statement = self._statement(spec)
        values = self._bind(spec, call_args)

        try:
            cursor = statement.execute(values)
        except Exception as e:
            raise OperationError(f"{name} execute failed: {e}", method=name) from e

        return self._reshape(spec, cursor)

    def _statement(self, spec: MethodSpec) -> PreparedStatement:
        statement = self._statements.get(spec.name)
        if statement is not None:
            return statement

        self.logger.debug(f"Preparing {spec.sql}")
        try:
            statement = PreparedStatement.prepare(spec.name, spec.sql, self._dbh, self.dialect)
        except Exception as e:
            raise OperationError(f"{spec.name} prepare failed: {e}", method=spec.name) from e

        self._statements[spec.name] = statement
        return statement

    def _bind(self, spec: MethodSpec, call_args: dict[str, Any]) -> list[Any]:
        remaining = dict(call_args)
        values = []
        for arg in spec.args:
            if arg not in remaining:
                raise OperationError(
                    f"{spec.name} Insufficient parameters ({arg})", method=spec.name
                )
            try:
                values.append(self.dialect.bind_value(arg, remaining.pop(arg)))
            except ValueError as e:
                raise OperationError(f"{spec.name}: {e}", method=spec.name) from None

        for arg in remaining:
            self.logger.warning(
                f'Useless argument "{arg}" provided for method "{spec.name}"',
                context={"argument": arg},
            )
        return values

    def _reshape(self, spec: MethodSpec, cursor: Any) -> Any:
        if spec.ret is ResultShape.EXECUTION_RESULT:
            return cursor.rowcount

        if spec.ret is ResultShape.LAST_INSERT_ID:
            insert_id = self.dialect.last_insert_id(cursor)
            if insert_id is None:
                raise OperationError(
                    f"{spec.name}: driver reported no auto-generated id", method=spec.name
                )
            return insert_id

        try:
            return ROW_READERS[spec.ret](cursor)
        except NoRowError as e:
            raise OperationError(f"{spec.name}: {e}", method=spec.name) from None
        except Exception as e:
            raise OperationError(f"{spec.name} fetch failed: {e}", method=spec.name) from e


def _coerce_connection_config(
    connection: ConnectionConfig | Mapping[str, Any] | str,
) -> ConnectionConfig:
    if isinstance(connection, ConnectionConfig):
        return connection
    if isinstance(connection, str):
        return ConnectionConfig.from_url(connection)
    if isinstance(connection, Mapping):
        return LazyMethodConfig.from_dict({"connection": dict(connection)}).connection
    raise ConfigurationError(f"Unsupported connection descriptor: {connection!r}")
