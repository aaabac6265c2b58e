"""Top-level package exposing the ChainErr public API."""

__version__ = "1.0.0"

from .core.native import extend_native_error
from .core.rendering import dumps, print_cause_chain, to_structured
from .exceptions import ArgumentError, CauseOptions, ChainedError
from .guards import (
    UNDEFINED,
    raise_if_empty_string,
    raise_if_null,
    raise_if_null_or_undefined,
    raise_if_null_or_whitespace,
    raise_if_undefined,
    raise_missing_argument,
)
from .utils.logger import ErrorLogger


def version() -> str:
    """Return the semantic version of this library."""
    return __version__


__all__ = [
    "ArgumentError",
    "CauseOptions",
    "ErrorLogger",
    "ChainedError",
    "UNDEFINED",
    "dumps",
    "extend_native_error",
    "print_cause_chain",
    "raise_if_empty_string",
    "raise_if_null",
    "raise_if_null_or_undefined",
    "raise_if_null_or_whitespace",
    "raise_if_undefined",
    "raise_missing_argument",
    "to_structured",
    "version",
]
