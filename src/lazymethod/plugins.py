"""Dialect discovery via Python entry points."""

from importlib.metadata import entry_points

from lazymethod.dialects import BUILTIN_DIALECTS, Dialect
from lazymethod.exceptions import ConfigurationError

DIALECT_GROUP = "lazymethod.dialects"

DIALECT_ALIASES = {
    "sqlite3": "sqlite",
    "postgres": "postgresql",
    "pg": "postgresql",
    "mariadb": "mysql",
}

_registered: dict[str, type[Dialect]] = {}


def register_dialect(name: str, dialect: type[Dialect]) -> None:
    """Register a dialect class at runtime.

    Registered dialects take precedence over built-in and entry point ones.
    """
    _registered[name.lower()] = dialect


def unregister_dialect(name: str) -> None:
    """Remove a dialect registered with register_dialect."""
    _registered.pop(name.lower(), None)


def discover_dialects() -> dict[str, type[Dialect]]:
    """Discover all dialects registered under the entry point group.

    Returns:
        Dictionary mapping dialect names to their classes
    """
    eps = entry_points(group=DIALECT_GROUP)
    return {ep.name: ep.load() for ep in eps}


def get_dialect(name: str) -> Dialect:
    """Get a dialect instance by name.

    Args:
        name: Dialect name (e.g., "sqlite", "mysql", "postgresql")

    Returns:
        A new instance of the dialect

    Raises:
        ConfigurationError: If no dialect has that name
    """
    key = name.lower()
    key = DIALECT_ALIASES.get(key, key)

    if key in _registered:
        return _registered[key]()
    if key in BUILTIN_DIALECTS:
        return BUILTIN_DIALECTS[key]()

    dialects = discover_dialects()
    if key not in dialects:
        known = set(BUILTIN_DIALECTS) | set(_registered) | set(dialects)
        available = ", ".join(sorted(known)) or "(none)"
        raise ConfigurationError(f"Dialect '{name}' not found. Available: {available}")
    return dialects[key]()
