"""Utility modules."""

from lazymethod.utils.placeholders import convert_placeholders, count_placeholders
from lazymethod.utils.validation import validate_arg_names, validate_method_name

__all__ = [
    "convert_placeholders",
    "count_placeholders",
    "validate_arg_names",
    "validate_method_name",
]
