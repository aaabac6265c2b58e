"""
Chained exception types.

:class:`ChainedError` records the error that triggered it (its *cause*), the
moment it was created and the stack at construction, and renders the whole
cause chain as text or as nested JSON-ready records for structured logging
pipelines. :class:`ArgumentError` specialises it for invalid arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from chainerr.core import native, rendering
from chainerr.core.capability import CauseStorage, resolve_cause_storage
from chainerr.core.introspection import capture_stack
from chainerr.utils.settings import get_settings

_UNSET: Any = object()


@dataclass(frozen=True)
class CauseOptions:
    """Explicit options form for :class:`ChainedError` construction."""

    cause: Any = None

    @classmethod
    def coerce(cls, value: Any) -> Optional["CauseOptions"]:
        """Return options for ``value`` when it is an options form, else ``None``."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping) and not isinstance(value, BaseException) and "cause" in value:
            return cls(cause=value["cause"])
        return None


class ChainedError(Exception):
    """
    Exception with a nested cause chain.

    Args:
        message: Human-readable description. ``None`` uses the configured
            default message.
        cause_or_options: Either the cause itself (usually another exception)
            or a :class:`CauseOptions` / ``{"cause": ...}`` mapping.
        cause: Keyword form of the cause. Mutually exclusive with a positional
            cause.
        name: Display name override. Defaults to the concrete class name.

    ``message``, ``name``, ``timestamp``, ``cause`` and ``stack`` are
    read-only once the instance exists.
    """

    def __init__(
        self,
        message: Optional[str] = None,
        cause_or_options: Any = None,
        *,
        cause: Any = _UNSET,
        name: Optional[str] = None,
    ) -> None:
        settings = get_settings()
        if message is None:
            message = settings.get("errors.default_message")
        message = str(message)
        super().__init__(message)

        if cause is not _UNSET:
            if cause_or_options is not None:
                raise TypeError("Pass the cause either positionally or as 'cause=', not both.")
            resolved_cause = cause
        else:
            options = CauseOptions.coerce(cause_or_options)
            resolved_cause = options.cause if options is not None else cause_or_options

        self._message = message
        self._name = name or type(self).__name__
        self._timestamp = datetime.now(timezone.utc)
        self._storage: CauseStorage = resolve_cause_storage(settings.get("errors.cause_storage"))
        self._storage.store(self, resolved_cause)
        self._stack: Optional[str] = None
        if settings.get("stack.capture"):
            self._stack = capture_stack(self._name, message, settings.get("stack.limit"))

    @classmethod
    def from_options(cls, message: Optional[str], options: CauseOptions) -> "ChainedError":
        """Construct from the explicit options form."""
        return cls(message, cause=options.cause)

    @property
    def message(self) -> str:
        return self._message

    @property
    def name(self) -> str:
        return self._name

    @property
    def timestamp(self) -> datetime:
        return self._timestamp

    @property
    def stack(self) -> Optional[str]:
        return self._stack

    @property
    def cause(self) -> Any:
        """The cause, read through whichever storage strategy was active at construction."""
        return self._storage.load(self)

    def isoformat_timestamp(self) -> str:
        """ISO-8601 UTC timestamp with millisecond precision, e.g. ``2025-05-09T10:00:00.000Z``."""
        return self._timestamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    def to_string(self) -> str:
        """Name, message and stack of this error followed by each cause, nested under ``Caused by...``."""
        return rendering.render_string(self)

    @property
    def full_stack(self) -> str:
        """This error's stack followed by one ``Caused by:`` line per cause."""
        return rendering.render_full_stack(self)

    def to_json(self) -> Dict[str, Any]:
        """
        JSON-ready record of this error and its ChainedError causes.

        A cause that is any other exception ends the walk and is embedded as
        the exception object itself, unless :func:`extend_native_error` was
        called first. Pass the error to :func:`chainerr.dumps` to serialize a
        mixed chain without that setup.
        """
        return rendering.render_json(self)

    @staticmethod
    def print_cause_chain(error: Any) -> str:
        """Indented ``<name>: <message>`` summary of any error-like chain."""
        return rendering.print_cause_chain(error)

    @staticmethod
    def extend_native_error() -> native.NativeSerializer:
        """Register the shallow serializer for foreign exceptions in JSON output."""
        return native.extend_native_error()

    @staticmethod
    def version() -> str:
        """Installed package version."""
        from chainerr import __version__

        return __version__

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._message!r})"


class ArgumentError(ChainedError):
    """Raised when a function receives an invalid or missing argument."""

    def __init__(
        self,
        message: Optional[str] = None,
        argument_name: Optional[str] = None,
        *,
        cause: Any = None,
    ) -> None:
        super().__init__(message, cause=cause)
        self._argument_name = argument_name

    @property
    def argument_name(self) -> Optional[str]:
        return self._argument_name


__all__ = [
    "ArgumentError",
    "CauseOptions",
    "ChainedError",
]
