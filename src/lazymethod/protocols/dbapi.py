"""Protocol for the DB-API 2.0 (PEP 249) drivers lazymethod sits on."""

from collections.abc import Sequence
from typing import Any, Protocol


class DBAPICursor(Protocol):
    """The subset of a PEP 249 cursor used by prepared statements."""

    description: Sequence[Sequence[Any]] | None
    rowcount: int
    lastrowid: Any

    def execute(self, operation: str, parameters: Sequence[Any] = ...) -> Any:
        """Execute an operation with positional parameters."""
        ...

    def fetchone(self) -> Sequence[Any] | None:
        """Fetch the next row, or None when exhausted."""
        ...

    def fetchall(self) -> Sequence[Sequence[Any]]:
        """Fetch all remaining rows."""
        ...

    def close(self) -> None:
        """Close the cursor."""
        ...


class DBAPIConnection(Protocol):
    """The subset of a PEP 249 connection used by lazymethod."""

    def cursor(self) -> DBAPICursor:
        """Create a new cursor."""
        ...

    def close(self) -> None:
        """Close the connection."""
        ...
