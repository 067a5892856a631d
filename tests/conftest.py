"""Pytest configuration and fixtures."""

from dataclasses import dataclass, field
from typing import Any

import pytest

from lazymethod.dialects.base import Dialect
from lazymethod.results import ResultShape


@dataclass
class FakeResult:
    """What the fake driver returns for one SQL string."""

    columns: list[str] | None = None
    rows: list[tuple] = field(default_factory=list)
    rowcount: int = -1
    lastrowid: Any = None


class FakeCursor:
    """DB-API cursor that records every call on its driver."""

    def __init__(self, driver: "FakeDriver", number: int) -> None:
        self.driver = driver
        self.number = number
        self.description = None
        self.rowcount = -1
        self.lastrowid = None
        self._rows: list[tuple] = []

    def execute(self, sql: str, params: tuple = ()) -> None:
        self.driver.calls.append(("execute", self.number, sql, params))
        if sql in self.driver.execute_errors:
            raise self.driver.execute_errors[sql]
        result = self.driver.results.get(sql, FakeResult())
        self.description = (
            [(name, None, None, None, None, None, None) for name in result.columns]
            if result.columns is not None
            else None
        )
        self.rowcount = result.rowcount
        self.lastrowid = result.lastrowid
        self._rows = list(result.rows)

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def close(self) -> None:
        self.driver.calls.append(("cursor.close", self.number))


class FakeConnection:
    """DB-API connection whose cursor() stands in for statement preparation."""

    def __init__(self, driver: "FakeDriver") -> None:
        self.driver = driver

    def cursor(self) -> FakeCursor:
        self.driver.prepare_count += 1
        if self.driver.prepare_error is not None:
            raise self.driver.prepare_error
        self.driver.calls.append(("cursor", self.driver.prepare_count))
        return FakeCursor(self.driver, self.driver.prepare_count)

    def close(self) -> None:
        self.driver.calls.append(("connection.close",))
        if self.driver.close_error is not None:
            raise self.driver.close_error


class FakeDriver:
    """Module-like stand-in for a DB-API driver."""

    paramstyle = "qmark"

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.results: dict[str, FakeResult] = {}
        self.execute_errors: dict[str, Exception] = {}
        self.prepare_count = 0
        self.prepare_error: Exception | None = None
        self.connect_error: Exception | None = None
        self.close_error: Exception | None = None
        self.connect_kwargs: dict[str, Any] | None = None

    def connect(self, **kwargs: Any) -> FakeConnection:
        self.calls.append(("connect",))
        if self.connect_error is not None:
            raise self.connect_error
        self.connect_kwargs = kwargs
        return FakeConnection(self)

    def executions(self) -> list[tuple]:
        return [call for call in self.calls if call[0] == "execute"]


class FakeDialect(Dialect):
    """Dialect wired to a FakeDriver instead of an importable module."""

    name = "fake"
    driver = "fake"

    def __init__(
        self,
        fake: FakeDriver,
        supports_last_insert_id: bool = False,
        typed_limit_args: bool = False,
    ) -> None:
        super().__init__()
        self._module = fake
        self.supports_last_insert_id = supports_last_insert_id
        self.typed_limit_args = typed_limit_args


@pytest.fixture
def fake_driver():
    """A fresh recording driver."""
    return FakeDriver()


@pytest.fixture
def fake_dialect(fake_driver):
    """Dialect without optional capabilities, backed by fake_driver."""
    return FakeDialect(fake_driver)


@pytest.fixture
def people_methods():
    """Method definitions for the people table used by sqlite tests."""
    return {
        "get_person": {
            "sql": "SELECT * FROM people WHERE id = ?",
            "args": ["id"],
            "ret": ResultShape.ROW_AS_MAP,
        },
        "get_person_row": {
            "sql": "SELECT id, name FROM people WHERE id = ?",
            "args": ["id"],
            "ret": ResultShape.ROWS_AS_LIST_OF_LISTS,
        },
        "list_people": {
            "sql": "SELECT id, name FROM people ORDER BY id",
            "args": [],
            "ret": ResultShape.ROWS_AS_LIST_OF_MAPS,
        },
        "list_names": {
            "sql": "SELECT name FROM people ORDER BY id",
            "args": [],
            "ret": ResultShape.ROWS_FLAT,
        },
        "page_people": {
            "sql": "SELECT id FROM people ORDER BY id LIMIT ? OFFSET ?",
            "args": ["limit_count", "limit_offset"],
            "ret": ResultShape.ROWS_FLAT,
        },
        "add_person": {
            "sql": "INSERT INTO people (name) VALUES (?)",
            "args": ["name"],
            "ret": ResultShape.LAST_INSERT_ID,
        },
        "rename_person": {
            "sql": "UPDATE people SET name = ? WHERE id = ?",
            "args": ["name", "id"],
            "ret": ResultShape.EXECUTION_RESULT,
        },
        "create_people": {
            "sql": "CREATE TABLE people (id INTEGER PRIMARY KEY, name TEXT NOT NULL)",
            "args": [],
            "ret": ResultShape.EXECUTION_RESULT,
        },
    }


@pytest.fixture
def sample_config_dict(people_methods):
    """Sample configuration dictionary for testing."""
    return {
        "connection": {"driver": "sqlite", "database": ":memory:"},
        "log_level": "DEBUG",
        "methods": {
            name: {**definition, "ret": definition["ret"].name}
            for name, definition in people_methods.items()
        },
    }
