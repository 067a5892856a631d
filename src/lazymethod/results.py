"""Result shapes and the row reshaping that goes with them."""

from enum import IntEnum
from typing import Any

from lazymethod.exceptions import ConfigurationError
from lazymethod.protocols.dbapi import DBAPICursor


class ResultShape(IntEnum):
    """How the result of an executed statement is handed back to the caller."""

    ROWS_FLAT = 1
    ROWS_AS_LIST_OF_LISTS = 2
    ROW_AS_MAP = 3
    ROWS_AS_LIST_OF_MAPS = 4
    EXECUTION_RESULT = 5
    LAST_INSERT_ID = 6

    @classmethod
    def parse(cls, value: Any) -> "ResultShape":
        """Parse a shape from the enum, its integer value or its name.

        Raises:
            ConfigurationError: If the value names no known shape
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            raise ConfigurationError(f"Bad result shape: {value!r}")
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError:
                raise ConfigurationError(f"Bad result shape: {value!r}") from None
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                raise ConfigurationError(f"Bad result shape: {value!r}") from None
        raise ConfigurationError(f"Bad result shape: {value!r}")


class NoRowError(Exception):
    """A single-row shape found nothing to fetch."""

    pass


def column_names(cursor: DBAPICursor) -> list[str]:
    """Return the column names of the cursor's current result set."""
    if cursor.description is None:
        raise NoRowError("statement did not produce a result set")
    return [column[0] for column in cursor.description]


def rows_flat(cursor: DBAPICursor) -> list[Any]:
    # Flatten every column of every row into one list
    column_names(cursor)
    return [value for row in cursor.fetchall() for value in row]


def row_as_list(cursor: DBAPICursor) -> list[Any]:
    column_names(cursor)
    row = cursor.fetchone()
    if row is None:
        raise NoRowError("statement returned no rows")
    return list(row)


def row_as_map(cursor: DBAPICursor) -> dict[str, Any]:
    names = column_names(cursor)
    row = cursor.fetchone()
    if row is None:
        raise NoRowError("statement returned no rows")
    return dict(zip(names, row))


def rows_as_maps(cursor: DBAPICursor) -> list[dict[str, Any]]:
    names = column_names(cursor)
    return [dict(zip(names, row)) for row in cursor.fetchall()]


ROW_READERS = {
    ResultShape.ROWS_FLAT: rows_flat,
    ResultShape.ROWS_AS_LIST_OF_LISTS: row_as_list,
    ResultShape.ROW_AS_MAP: row_as_map,
    ResultShape.ROWS_AS_LIST_OF_MAPS: rows_as_maps,
}
