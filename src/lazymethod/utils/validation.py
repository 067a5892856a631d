"""Input validation utilities."""

import re

# Method names must be usable as Python identifiers and must not look private
METHOD_NAME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


def validate_method_name(value: str, max_length: int = 128) -> str:
    """Validate an accessor method name.

    Args:
        value: The method name to validate
        max_length: Maximum allowed length

    Returns:
        The validated method name

    Raises:
        ValueError: If the name is invalid
    """
    if not value:
        raise ValueError("method name cannot be empty")

    if len(value) > max_length:
        raise ValueError(f"method name exceeds maximum length of {max_length}")

    if not METHOD_NAME_RE.match(value):
        raise ValueError(
            f"Invalid method name {value!r}: must start with a letter and contain "
            "only alphanumeric characters and underscores"
        )

    return value


def validate_arg_names(values: object) -> tuple[str, ...]:
    """Validate a method's argument name list.

    Raises:
        ValueError: If the list is not a list/tuple of non-empty strings
    """
    if not isinstance(values, (list, tuple)):
        raise ValueError("bad argument list: must be a list of names")

    for name in values:
        if not isinstance(name, str) or not name:
            raise ValueError(f"bad argument list: invalid argument name {name!r}")

    return tuple(values)
