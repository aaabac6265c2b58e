"""
Fail-fast argument validation helpers.

Each helper raises :class:`~chainerr.exceptions.ArgumentError` carrying the
offending argument's name when its condition holds, and returns ``None``
otherwise. ``None`` plays the role of *null*; :data:`UNDEFINED` marks a value
that was never supplied at all.
"""

from __future__ import annotations

from typing import Any, NoReturn, Optional

from chainerr.exceptions import ArgumentError

DEFAULT_ARGUMENT_NAME = "argument"


class _Undefined:
    """Sentinel type for a value that was never supplied."""

    _instance: Optional["_Undefined"] = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


def _display(argument_name: Optional[str]) -> str:
    return argument_name if argument_name is not None else DEFAULT_ARGUMENT_NAME


def raise_if_null(value: Any, argument_name: Optional[str] = None) -> None:
    """Raise when ``value`` is ``None``."""
    if value is None:
        raise ArgumentError(f"{_display(argument_name)} can not be 'null'", argument_name)


def raise_if_undefined(value: Any, argument_name: Optional[str] = None) -> None:
    """Raise when ``value`` is :data:`UNDEFINED`."""
    if value is UNDEFINED:
        raise ArgumentError(f"{_display(argument_name)} can not be 'undefined'", argument_name)


def raise_if_null_or_undefined(value: Any, argument_name: Optional[str] = None) -> None:
    if value is None or value is UNDEFINED:
        raise ArgumentError(f"{_display(argument_name)} can not be 'null' or 'undefined'", argument_name)


def raise_missing_argument(argument_name: Optional[str] = None) -> NoReturn:
    """Unconditionally report a required argument as missing."""
    raise ArgumentError(f"{_display(argument_name)} is missing", argument_name)


def raise_if_empty_string(value: Any, argument_name: Optional[str] = None) -> None:
    if isinstance(value, str) and value == "":
        raise ArgumentError(f"{_display(argument_name)} cannot be an empty string", argument_name)


def raise_if_null_or_whitespace(value: Any, argument_name: Optional[str] = None) -> None:
    """Raise for ``None``, :data:`UNDEFINED`, or a string that is empty once stripped."""
    if value is None or value is UNDEFINED or (isinstance(value, str) and value.strip() == ""):
        raise ArgumentError(f"{_display(argument_name)} cannot be null, empty, or whitespace", argument_name)


__all__ = [
    "UNDEFINED",
    "raise_if_empty_string",
    "raise_if_null",
    "raise_if_null_or_undefined",
    "raise_if_null_or_whitespace",
    "raise_if_undefined",
    "raise_missing_argument",
]
