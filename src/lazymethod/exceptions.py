"""lazymethod exceptions."""


class LazyMethodError(Exception):
    """Base exception for lazymethod."""

    pass


class ConfigurationError(LazyMethodError):
    """Invalid method definitions, dialect or configuration file."""

    pass


class DatabaseConnectionError(LazyMethodError):
    """The database connection could not be established."""

    pass


class OperationError(LazyMethodError):
    """A method invocation failed.

    Recorded on the connection's error state. Only raised to the caller
    when the connection was created with ``raise_errors=True``.
    """

    def __init__(self, message: str, method: str | None = None) -> None:
        super().__init__(message)
        self.method = method
