"""
Duck-typed access to anything that looks like an error.

A chain link may be a :class:`~chainerr.exceptions.ChainedError`, any other
exception, a plain object exposing ``name``/``message``/``cause`` attributes,
or a mapping such as a previously serialized record. The helpers below read
whichever subset of that capability a value supports.
"""

from __future__ import annotations

import os
import traceback
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, Mapping, Optional

from loguru import logger

_PACKAGE_ROOT = str(Path(__file__).resolve().parents[1]) + os.sep


def _is_chained(obj: Any) -> bool:
    # Local import: exceptions imports this module.
    from chainerr.exceptions import ChainedError

    return isinstance(obj, ChainedError)


def _text_attr(obj: Any, attr: str) -> Optional[str]:
    if isinstance(obj, Mapping):
        value = obj.get(attr)
    else:
        value = getattr(obj, attr, None)
    return value if isinstance(value, str) else None


def name_of(obj: Any) -> Optional[str]:
    """Display name of an error-like value."""
    if obj is None:
        return None
    if _is_chained(obj):
        return obj.name
    if isinstance(obj, BaseException):
        # NameError.name, ImportError.name etc. are not the error kind
        return type(obj).__name__
    return _text_attr(obj, "name")


def message_of(obj: Any) -> Optional[str]:
    """Message of an error-like value."""
    if obj is None:
        return None
    if _is_chained(obj):
        return obj.message
    message = _text_attr(obj, "message")
    if message is None and isinstance(obj, BaseException):
        return str(obj)
    return message


def stack_of(obj: Any) -> Optional[str]:
    """Textual stack of an error-like value; raised exceptions use their traceback."""
    if obj is None:
        return None
    if _is_chained(obj):
        return obj.stack
    if isinstance(obj, BaseException):
        if obj.__traceback__ is None:
            return _text_attr(obj, "stack")
        return "".join(traceback.format_exception(type(obj), obj, obj.__traceback__, chain=False)).rstrip("\n")
    return _text_attr(obj, "stack")


def cause_of(obj: Any) -> Any:
    """The next link in the chain, or ``None``."""
    if obj is None:
        return None
    if _is_chained(obj):
        return obj.cause
    if isinstance(obj, BaseException):
        if obj.__cause__ is not None:
            return obj.__cause__
        return getattr(obj, "cause", None)
    if isinstance(obj, Mapping):
        return obj.get("cause")
    return getattr(obj, "cause", None)


def describe(obj: Any) -> str:
    """``"<name>: <message>"`` with literal fallbacks, used by chain summaries and markers."""
    return f"{name_of(obj) or 'Error'}: {message_of(obj) or '(no message)'}"


@dataclass(frozen=True)
class ChainLink:
    """One element of a cause chain."""

    depth: int
    error: Any


@dataclass(frozen=True)
class ChainBreak:
    """Why a chain walk stopped early: ``circular`` or ``truncated``."""

    reason: str
    depth: int
    error: Any


class ChainWalk:
    """
    Iterate over a cause chain without looping forever.

    Iteration yields :class:`ChainLink` items. After exhaustion ``broken``
    holds a :class:`ChainBreak` when the walk stopped on a repeated link or on
    the depth cap, otherwise ``None``.
    """

    def __init__(self, error: Any, max_depth: int) -> None:
        self.error = error
        self.max_depth = max_depth
        self.broken: Optional[ChainBreak] = None

    def __iter__(self) -> Iterator[ChainLink]:
        seen = set()
        current = self.error
        depth = 0
        while current is not None:
            if id(current) in seen:
                self.broken = ChainBreak("circular", depth, current)
                logger.warning("Circular cause chain detected at depth {}: {}", depth, describe(current))
                return
            if depth >= self.max_depth:
                self.broken = ChainBreak("truncated", depth, current)
                logger.warning("Cause chain truncated after {} links", self.max_depth)
                return
            seen.add(id(current))
            yield ChainLink(depth, current)
            current = cause_of(current)
            depth += 1


def capture_stack(name: str, message: str, limit: Optional[int] = None) -> str:
    """
    Format the current call stack like a Python traceback.

    Trailing frames that live inside this package (constructors, guard
    helpers) are removed so the innermost frame is the caller's.
    """

    frames = traceback.extract_stack()
    while frames and os.path.abspath(frames[-1].filename).startswith(_PACKAGE_ROOT):
        frames.pop()
    if limit is not None:
        frames = frames[-limit:] if limit > 0 else []
    lines = ["Traceback (most recent call last):\n"]
    lines.extend(traceback.format_list(frames))
    lines.append(f"{name}: {message}" if message else name)
    return "".join(lines)
