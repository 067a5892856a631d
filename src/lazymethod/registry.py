"""Method registry: validates accessor method definitions up front."""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from lazymethod.config import MethodDefinition
from lazymethod.dialects.base import Dialect
from lazymethod.exceptions import ConfigurationError
from lazymethod.observability import StructuredLogger, invocation_scope
from lazymethod.results import ResultShape
from lazymethod.utils.placeholders import count_placeholders
from lazymethod.utils.validation import validate_arg_names, validate_method_name

# Names of LazyConnection operations; accessor methods may not shadow them
RESERVED_NAMES = frozenset({
    "connect",
    "disconnect",
    "close",
    "invoke",
    "is_error",
    "error",
    "error_message",
})

REQUIRED_KEYS = (
    ("sql", "missing SQL"),
    ("args", "missing argument definition"),
    ("ret", "missing return data definition"),
)


@dataclass(frozen=True)
class MethodSpec:
    """A validated accessor method."""

    name: str
    sql: str
    args: tuple[str, ...]
    ret: ResultShape


def build_method_spec(
    name: str,
    definition: Mapping[str, Any] | MethodDefinition,
    dialect: Dialect,
    logger: StructuredLogger,
) -> MethodSpec:
    """Validate one method definition.

    Args:
        name: Accessor method name
        definition: Mapping with ``sql``, ``args`` and ``ret`` keys
        dialect: Dialect whose capabilities constrain the result shape
        logger: Receives the placeholder mismatch warning

    Raises:
        ConfigurationError: If the definition is unusable
    """
    if not isinstance(name, str):
        raise ConfigurationError(f"Method name must be a string, got {name!r}")
    if name in RESERVED_NAMES:
        raise ConfigurationError(f"Method name {name} is a reserved method name")
    try:
        validate_method_name(name)
    except ValueError as e:
        raise ConfigurationError(str(e)) from None

    if isinstance(definition, MethodDefinition):
        definition = definition.model_dump()
    if not isinstance(definition, Mapping):
        raise ConfigurationError(f"Method {name}: definition must be a mapping")

    for key, problem in REQUIRED_KEYS:
        if definition.get(key) is None:
            raise ConfigurationError(f"Method {name}: {problem}")

    sql = definition["sql"]
    if not isinstance(sql, str) or not sql.strip():
        raise ConfigurationError(f"Method {name}: SQL must be a non-empty string")

    try:
        args = validate_arg_names(definition["args"])
    except ValueError as e:
        raise ConfigurationError(f"Method {name}: {e}") from None

    placeholders = count_placeholders(sql, dialect.backslash_escapes)
    if len(args) != placeholders:
        logger.warning(
            f"Method {name}: argument list does not match number of placeholders "
            "in SQL. The driver will most likely reject the statement.",
            context={"args": len(args), "placeholders": placeholders},
        )

    try:
        ret = ResultShape.parse(definition["ret"])
    except ConfigurationError:
        raise ConfigurationError(f"Bad return value definition in method {name}") from None

    if ret is ResultShape.LAST_INSERT_ID and not dialect.supports_last_insert_id:
        raise ConfigurationError(
            f"Return value type LAST_INSERT_ID not supported by the "
            f"{dialect.name} dialect in method {name}"
        )

    return MethodSpec(name=name, sql=sql, args=args, ret=ret)


def build_registry(
    methods: Mapping[str, Any],
    dialect: Dialect,
    logger: StructuredLogger,
) -> Mapping[str, MethodSpec]:
    """Validate every definition and return a read-only name → MethodSpec map.

    Raises:
        ConfigurationError: On the first invalid definition
    """
    if not isinstance(methods, Mapping):
        raise ConfigurationError("Invalid methods definition: methods must be a mapping")
    if not methods:
        raise ConfigurationError("No methods in methods mapping")

    registry = {}
    for name, definition in methods.items():
        with invocation_scope(str(name)):
            registry[name] = build_method_spec(name, definition, dialect, logger)
    return MappingProxyType(registry)
