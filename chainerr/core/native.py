"""
Structured form for exceptions that never went through ChainedError.

Exceptions raised by the standard library or third-party code have no
``to_json`` of their own. :func:`extend_native_error` installs a shallow
serializer for every :class:`BaseException` in a process-wide registry that
:meth:`ChainedError.to_json` consults when it meets such a cause.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional

from loguru import logger

from .introspection import cause_of, message_of, name_of, stack_of

NativeSerializer = Callable[[BaseException], Dict[str, Any]]

_installed: Optional[NativeSerializer] = None


def native_to_json(error: BaseException) -> Dict[str, Any]:
    """Shallow record of a plain exception. The cause is embedded as-is."""
    record: Dict[str, Any] = {
        "name": name_of(error),
        "type": type(error).__name__,
        "message": message_of(error),
        "stack": stack_of(error),
    }
    cause = cause_of(error)
    if cause is not None:
        record["cause"] = cause
    return record


def extend_native_error() -> NativeSerializer:
    """
    Install :func:`native_to_json` for all exceptions.

    Idempotent: when a serializer is already installed it is left untouched
    and returned.
    """

    global _installed
    if _installed is None:
        _installed = native_to_json
        logger.debug("Installed native exception serializer")
    return _installed


def native_serializer() -> Optional[NativeSerializer]:
    """The installed serializer, or ``None`` before :func:`extend_native_error`."""
    return _installed
