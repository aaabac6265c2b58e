"""
Text and structured views over a cause chain.

Every view walks the chain iteratively from the receiver outward. A link that
was already visited, or a chain longer than ``rendering.max_depth``, ends the
walk with a marker instead of recursing forever.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger

from chainerr.utils.settings import get_settings

from .introspection import (
    ChainBreak,
    ChainWalk,
    cause_of,
    describe,
    message_of,
    name_of,
    stack_of,
)
from .native import native_serializer


@dataclass(frozen=True)
class RenderOptions:
    indent: str
    max_depth: int
    circular_marker: str
    truncated_marker: str

    @classmethod
    def from_settings(cls) -> "RenderOptions":
        settings = get_settings()
        return cls(
            indent=settings.get("rendering.indent"),
            max_depth=int(settings.get("rendering.max_depth")),
            circular_marker=settings.get("rendering.circular_marker"),
            truncated_marker=settings.get("rendering.truncated_marker"),
        )

    def marker(self, brk: ChainBreak) -> str:
        label = self.circular_marker if brk.reason == "circular" else self.truncated_marker
        return f"{label} {describe(brk.error)}"


def _is_chained(obj: Any) -> bool:
    from chainerr.exceptions import ChainedError

    return isinstance(obj, ChainedError)


def _indent_block(text: str, indent: str) -> str:
    return "\n".join(indent + line for line in text.split("\n"))


def _headline(error: Any, indent: str) -> str:
    name = name_of(error)
    message = message_of(error)
    if name is None and message is None:
        return str(error)
    text = name or "Error"
    if message:
        text += f": {message}"
    stack = stack_of(error)
    if stack:
        text += "\n" + _indent_block(stack, indent)
    return text


def render_string(error: Any, options: Optional[RenderOptions] = None) -> str:
    """Name, message and indented stack of each link, nested under ``Caused by...``."""

    options = options or RenderOptions.from_settings()
    walk = ChainWalk(error, options.max_depth)
    blocks = [_headline(link.error, options.indent) for link in walk]
    text: Optional[str] = options.marker(walk.broken) if walk.broken else None
    for block in reversed(blocks):
        text = block if text is None else f"{block}\nCaused by...\n{_indent_block(text, options.indent)}"
    return text or ""


def render_full_stack(error: Any, options: Optional[RenderOptions] = None) -> str:
    """Own stack followed by one flat ``Caused by:`` line per cause."""

    options = options or RenderOptions.from_settings()
    walk = ChainWalk(error, options.max_depth)
    parts: List[str] = []
    for link in walk:
        if link.depth == 0:
            parts.append(stack_of(link.error) or "")
            continue
        detail = stack_of(link.error) or message_of(link.error)
        parts.append(f"\nCaused by: {detail if detail is not None else link.error}")
    if walk.broken:
        parts.append(f"\nCaused by: {options.marker(walk.broken)}")
    return "".join(parts)


def print_cause_chain(error: Any, options: Optional[RenderOptions] = None) -> str:
    """One ``<name>: <message>`` line per link, indented by depth."""

    options = options or RenderOptions.from_settings()
    walk = ChainWalk(error, options.max_depth)
    lines = [f"{options.indent * link.depth}{describe(link.error)}" for link in walk]
    if walk.broken:
        lines.append(f"{options.indent * walk.broken.depth}{options.marker(walk.broken)}")
    return "\n".join(lines)


def _is_error_like(obj: Any) -> bool:
    if isinstance(obj, BaseException):
        return True
    if isinstance(obj, Mapping):
        return False
    return name_of(obj) is not None or message_of(obj) is not None


def _own_record(error: Any) -> Dict[str, Any]:
    if _is_chained(error):
        return {
            "name": error.name,
            "type": type(error).__name__,
            "timestamp": error.isoformat_timestamp(),
            "message": error.message,
            "stack": error.stack,
        }
    return {
        "name": name_of(error) or "Error",
        "type": type(error).__name__,
        "message": message_of(error),
        "stack": stack_of(error),
    }


def _overrides_to_json(error: Any) -> bool:
    from chainerr.exceptions import ChainedError

    return isinstance(error, ChainedError) and type(error).to_json is not ChainedError.to_json


def _structure(error: Any, deep: bool, options: RenderOptions) -> Any:
    """
    Build nested records for ``error`` and its causes.

    A ChainedError whose class overrides ``to_json`` is embedded via that
    override (as a cause, or as the head when ``deep=True``). With
    ``deep=False`` only ChainedError links become records; any other cause
    ends the walk and is embedded via its own ``to_json``, the native
    serializer, or as-is. With ``deep=True`` every exception-like link
    becomes a record.
    """

    records: List[Dict[str, Any]] = []
    seen = set()
    current = error
    tail: Any = None
    while current is not None:
        depth = len(records)
        if id(current) in seen:
            logger.warning("Circular cause chain detected at depth {}: {}", depth, describe(current))
            tail = options.marker(ChainBreak("circular", depth, current))
            break
        if depth >= options.max_depth:
            logger.warning("Cause chain truncated after {} links", options.max_depth)
            tail = options.marker(ChainBreak("truncated", depth, current))
            break
        if (records or deep) and _overrides_to_json(current):
            tail = current.to_json()
            break
        if not _is_chained(current):
            to_json = getattr(current, "to_json", None)
            if callable(to_json):
                tail = to_json()
                break
            if not deep:
                serializer = native_serializer()
                tail = serializer(current) if serializer and isinstance(current, BaseException) else current
                break
            if not _is_error_like(current):
                tail = current
                break
        seen.add(id(current))
        records.append(_own_record(current))
        current = cause_of(current)
    for record in reversed(records):
        record["cause"] = tail
        tail = record
    return tail


def render_json(error: Any, options: Optional[RenderOptions] = None) -> Dict[str, Any]:
    """Structured record of a ChainedError and its ChainedError causes."""

    return _structure(error, deep=False, options=options or RenderOptions.from_settings())


def to_structured(error: Any, options: Optional[RenderOptions] = None) -> Any:
    """
    Structured form of any error-like value, recursing through foreign causes.

    Use this on exceptions that never went through ChainedError before handing
    them to a JSON encoder or a structured logger.
    """

    if error is None:
        return None
    return _structure(error, deep=True, options=options or RenderOptions.from_settings())


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseException):
        return to_structured(value)
    return str(value)


def dumps(error: Any, **kwargs: Any) -> str:
    """``json.dumps`` of :func:`to_structured`; exceptions nested anywhere are structured too."""

    kwargs.setdefault("default", _json_default)
    return json.dumps(to_structured(error), **kwargs)
