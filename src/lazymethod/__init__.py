"""lazymethod - SQL templates as lazily prepared accessor methods."""

from lazymethod.config import ConnectionConfig, LazyMethodConfig, MethodDefinition
from lazymethod.connection import ErrorState, LazyConnection
from lazymethod.dialects import Dialect, MySQLDialect, PostgreSQLDialect, SQLiteDialect
from lazymethod.exceptions import (
    ConfigurationError,
    DatabaseConnectionError,
    LazyMethodError,
    OperationError,
)
from lazymethod.observability import (
    LogLevel,
    StructuredLogger,
    get_logger,
    invocation_scope,
    register_metric_callback,
)
from lazymethod.plugins import get_dialect, register_dialect
from lazymethod.registry import RESERVED_NAMES, MethodSpec
from lazymethod.results import ResultShape

__version__ = "0.1.0"
__all__ = [
    # Core
    "ErrorState",
    "LazyConnection",
    "MethodSpec",
    "RESERVED_NAMES",
    "ResultShape",
    # Configuration
    "ConnectionConfig",
    "LazyMethodConfig",
    "MethodDefinition",
    # Dialects
    "Dialect",
    "MySQLDialect",
    "PostgreSQLDialect",
    "SQLiteDialect",
    "get_dialect",
    "register_dialect",
    # Errors
    "ConfigurationError",
    "DatabaseConnectionError",
    "LazyMethodError",
    "OperationError",
    # Observability
    "LogLevel",
    "StructuredLogger",
    "get_logger",
    "invocation_scope",
    "register_metric_callback",
]
