"""Tests for dialects and dialect lookup."""

from types import SimpleNamespace

import pytest

from conftest import FakeDialect
from lazymethod.config import ConnectionConfig
from lazymethod.dialects import Dialect, MySQLDialect, PostgreSQLDialect, SQLiteDialect
from lazymethod.exceptions import ConfigurationError
from lazymethod.plugins import get_dialect, register_dialect, unregister_dialect


class TestGetDialect:
    """Tests for get_dialect."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("sqlite", SQLiteDialect),
            ("sqlite3", SQLiteDialect),
            ("MySQL", MySQLDialect),
            ("mariadb", MySQLDialect),
            ("postgresql", PostgreSQLDialect),
            ("postgres", PostgreSQLDialect),
            ("pg", PostgreSQLDialect),
        ],
    )
    def test_builtin_dialects(self, name, expected) -> None:
        """Built-in dialects resolve by name and alias."""
        assert isinstance(get_dialect(name), expected)

    def test_returns_new_instances(self) -> None:
        """Each connection gets its own dialect instance."""
        assert get_dialect("sqlite") is not get_dialect("sqlite")

    def test_unknown_dialect(self) -> None:
        """Unknown names list what is available."""
        with pytest.raises(ConfigurationError, match="Available: .*sqlite"):
            get_dialect("db2")

    def test_registered_dialect_wins(self) -> None:
        """Runtime registration overrides the built-ins."""

        class CustomSQLite(SQLiteDialect):
            pass

        register_dialect("sqlite", CustomSQLite)
        try:
            assert isinstance(get_dialect("sqlite"), CustomSQLite)
        finally:
            unregister_dialect("sqlite")
        assert type(get_dialect("sqlite")) is SQLiteDialect


class TestCapabilities:
    """Tests for capability flags."""

    def test_flags(self) -> None:
        """Only MySQL needs integer limit_ arguments; PostgreSQL has no lastrowid."""
        assert MySQLDialect.supports_last_insert_id and MySQLDialect.typed_limit_args
        assert SQLiteDialect.supports_last_insert_id and not SQLiteDialect.typed_limit_args
        assert not PostgreSQLDialect.supports_last_insert_id
        assert not Dialect.supports_last_insert_id and not Dialect.typed_limit_args
        assert MySQLDialect.backslash_escapes
        assert not SQLiteDialect.backslash_escapes and not PostgreSQLDialect.backslash_escapes

    def test_bind_value_coerces_limit_args(self) -> None:
        """limit_ values become integers on MySQL."""
        dialect = MySQLDialect()
        assert dialect.bind_value("limit_count", "25") == 25
        assert dialect.bind_value("limit_count", None) is None
        assert dialect.bind_value("count", "25") == "25"

    @pytest.mark.parametrize("value", ["many", 2.5j, True, [1]])
    def test_bind_value_rejects_non_integers(self, value) -> None:
        """Values that are not integers cannot fill a LIMIT."""
        with pytest.raises(ValueError, match="limit_rows"):
            MySQLDialect().bind_value("limit_rows", value)

    def test_bind_value_passthrough(self) -> None:
        """Other dialects bind values unchanged."""
        assert SQLiteDialect().bind_value("limit_count", "25") == "25"


class TestConnectArguments:
    """Tests for the keyword arguments handed to each driver."""

    def test_sqlite_defaults(self) -> None:
        """SQLite defaults to an in-memory autocommit database."""
        assert SQLiteDialect().connect_kwargs(ConnectionConfig()) == {
            "database": ":memory:",
            "isolation_level": None,
        }

    def test_sqlite_options_override(self) -> None:
        """Options can turn implicit transactions back on."""
        config = ConnectionConfig(database="app.db", options={"isolation_level": "DEFERRED"})
        assert SQLiteDialect().connect_kwargs(config)["isolation_level"] == "DEFERRED"

    def test_mysql_kwargs(self) -> None:
        """MySQL gets credentials and autocommit."""
        config = ConnectionConfig(
            driver="mysql", database="app", host="db", port=3306, user="u", password="p",
            options={"charset": "utf8mb4"},
        )
        assert MySQLDialect().connect_kwargs(config) == {
            "database": "app",
            "host": "db",
            "port": 3306,
            "user": "u",
            "password": "p",
            "charset": "utf8mb4",
            "autocommit": True,
        }

    def test_postgresql_connect(self) -> None:
        """psycopg2 takes dbname, and autocommit is set on the connection."""
        received = {}
        conn = SimpleNamespace(autocommit=False)

        def connect(**kwargs):
            received.update(kwargs)
            return conn

        dialect = PostgreSQLDialect()
        dialect._module = SimpleNamespace(connect=connect, paramstyle="pyformat")

        result = dialect.connect(ConnectionConfig(driver="postgresql", database="app", host="h"))

        assert result is conn
        assert conn.autocommit is True
        assert received == {"dbname": "app", "host": "h"}

    def test_format_paramstyle_translation(self) -> None:
        """Templates are rewritten for the driver's paramstyle."""
        dialect = MySQLDialect()
        dialect._module = SimpleNamespace(paramstyle="pyformat")

        assert dialect.prepare_sql("SELECT * FROM t LIMIT ?, ?") == "SELECT * FROM t LIMIT %s, %s"

    def test_mysql_backslash_escaped_quote(self) -> None:
        """An escaped quote does not end a MySQL literal early."""
        dialect = MySQLDialect()
        dialect._module = SimpleNamespace(paramstyle="pyformat")

        assert dialect.prepare_sql(r"SELECT * FROM t WHERE a = 'it\'s ?' AND b = ?") == (
            r"SELECT * FROM t WHERE a = 'it\'s ?' AND b = %s"
        )

    def test_postgresql_backslash_is_literal(self) -> None:
        """Standard SQL strings end at the quote after a backslash."""
        dialect = PostgreSQLDialect()
        dialect._module = SimpleNamespace(paramstyle="pyformat")

        assert dialect.prepare_sql("SELECT 'C:\\' AS dir, ?") == "SELECT 'C:\\' AS dir, %s"

    def test_missing_driver(self, fake_driver) -> None:
        """A missing driver module is a configuration error."""

        class Nowhere(FakeDialect):
            driver = "lazymethod_missing_driver"

        dialect = Nowhere(fake_driver)
        dialect._module = None
        with pytest.raises(ConfigurationError, match="lazymethod_missing_driver"):
            dialect.load_driver()
