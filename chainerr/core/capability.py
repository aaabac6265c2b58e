"""
Cause storage strategies.

Whether the host exception type can carry a chained cause is probed once per
process. Every :class:`~chainerr.exceptions.ChainedError` then reads and writes
its cause through a strategy object so callers never see which path is used.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Dict

from loguru import logger

CAUSE_STORAGE_MODES = ("auto", "native", "simulated")


@lru_cache(maxsize=None)
def supports_native_cause() -> bool:
    """Return ``True`` when exceptions keep an attached ``__cause__``."""

    try:
        inner = Exception("inner")
        probe = Exception("test")
        probe.__cause__ = inner
        supported = probe.__cause__ is inner
    except Exception as exc:  # noqa: BLE001 - any probe failure means "unsupported"
        logger.debug("Native cause probe failed: {}", exc)
        supported = False
    logger.debug("Native exception cause support: {}", supported)
    return supported


class CauseStorage(ABC):
    """Reads and writes the cause of an error instance."""

    name: str = "abstract"

    @abstractmethod
    def store(self, error: BaseException, cause: Any) -> None:
        """Attach ``cause`` to ``error``."""

    @abstractmethod
    def load(self, error: BaseException) -> Any:
        """Return the cause attached to ``error`` or ``None``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class NativeCauseStorage(CauseStorage):
    """
    Delegate to the interpreter's ``__cause__`` slot.

    ``__cause__`` only accepts exceptions, so any other cause value is kept
    in a private slot beside it and returned when ``__cause__`` is empty.
    """

    name = "native"

    def store(self, error: BaseException, cause: Any) -> None:
        if isinstance(cause, BaseException):
            error.__cause__ = cause
            error._chainerr_raw_cause = None  # type: ignore[attr-defined]
        else:
            error._chainerr_raw_cause = cause  # type: ignore[attr-defined]

    def load(self, error: BaseException) -> Any:
        if error.__cause__ is not None:
            return error.__cause__
        return getattr(error, "_chainerr_raw_cause", None)


class SimulatedCauseStorage(CauseStorage):
    """Keep exception causes in a private field and drop anything else."""

    name = "simulated"

    def store(self, error: BaseException, cause: Any) -> None:
        if isinstance(cause, BaseException):
            error._chainerr_cause = cause  # type: ignore[attr-defined]
            return
        error._chainerr_cause = None  # type: ignore[attr-defined]
        if cause is not None:
            logger.debug(
                "Dropping non-exception cause of type {} (simulated cause storage)",
                type(cause).__name__,
            )

    def load(self, error: BaseException) -> Any:
        return getattr(error, "_chainerr_cause", None)


_STRATEGIES: Dict[str, CauseStorage] = {
    NativeCauseStorage.name: NativeCauseStorage(),
    SimulatedCauseStorage.name: SimulatedCauseStorage(),
}


def resolve_cause_storage(mode: str = "auto") -> CauseStorage:
    """Map a configured storage mode onto a strategy instance."""

    if mode not in CAUSE_STORAGE_MODES:
        raise ValueError(f"Unknown cause storage mode '{mode}'. Options: {list(CAUSE_STORAGE_MODES)}")
    if mode == "auto":
        mode = NativeCauseStorage.name if supports_native_cause() else SimulatedCauseStorage.name
    return _STRATEGIES[mode]
