"""
Environment diagnostics for ChainErr.

The diagnostics are intentionally lightweight so they can run quickly from the
CLI (`python cli.py doctor`) and during CI checks. Each diagnostic returns a
dictionary with a human-readable description, status, and optional details.
"""

from __future__ import annotations

import importlib
import platform
import sys
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, List, Optional

from chainerr.core.capability import supports_native_cause, resolve_cause_storage
from chainerr.core.native import native_serializer
from chainerr.utils.settings import CONFIG_ENV_VAR, env_config_path, get_settings


MIN_PYTHON = (3, 9)
CRITICAL_DEPENDENCIES = [
    "loguru",
    "omegaconf",
    "yaml",
]
OPTIONAL_DEPENDENCIES = [
    "pytest",
]


@dataclass
class CheckResult:
    """Structured diagnostic result."""

    check: str
    status: str
    details: Optional[str] = None

    def as_dict(self) -> Dict[str, Optional[str]]:
        payload = asdict(self)
        if payload["details"] is None:
            payload.pop("details")
        return payload


def _status(ok: bool) -> str:
    return "pass" if ok else "fail"


def _check_python_version() -> CheckResult:
    current = sys.version_info
    ok = current >= MIN_PYTHON
    details = f"Detected Python {current.major}.{current.minor}.{current.micro}"
    if not ok:
        details += f" (requires >= {MIN_PYTHON[0]}.{MIN_PYTHON[1]})"
    return CheckResult(check="Python runtime", status=_status(ok), details=details)


def _check_dependency(module_name: str, /, *, optional: bool = False) -> CheckResult:
    label = module_name.replace("_", " ")
    try:
        module = importlib.import_module(module_name)
    except Exception as exc:  # pragma: no cover - dependent on external env
        status = "warn" if optional else "fail"
        details = f"{exc.__class__.__name__}: {exc}"
        return CheckResult(
            check=f"Python package '{label}' import",
            status=status,
            details=details,
        )
    version = getattr(module, "__version__", "unknown")
    return CheckResult(
        check=f"Python package '{label}' import",
        status="pass",
        details=f"{version}",
    )


def _check_native_cause() -> CheckResult:
    supported = supports_native_cause()
    return CheckResult(
        check="Native exception cause support",
        status="pass" if supported else "warn",
        details=None if supported else "Falling back to simulated cause storage.",
    )


def _check_cause_storage() -> CheckResult:
    try:
        mode = get_settings().get("errors.cause_storage")
        strategy = resolve_cause_storage(mode)
    except (FileNotFoundError, ValueError) as exc:
        return CheckResult(check="Cause storage strategy", status="fail", details=str(exc))
    return CheckResult(
        check="Cause storage strategy",
        status="pass",
        details=f"{strategy.name} (configured: {mode})",
    )


def _check_native_serializer() -> CheckResult:
    installed = native_serializer() is not None
    details = "installed" if installed else "Call extend_native_error() to serialize foreign exception causes."
    return CheckResult(
        check="Native exception serializer",
        status="pass" if installed else "warn",
        details=details,
    )


def _check_config_file() -> Iterable[CheckResult]:
    path = env_config_path()
    if path is None:
        return
    if path.exists():
        yield CheckResult(check=f"{CONFIG_ENV_VAR} file", status="pass", details=str(path.resolve()))
    else:
        yield CheckResult(check=f"{CONFIG_ENV_VAR} file", status="fail", details=f"Missing at {path.resolve()}")


def _check_platform() -> CheckResult:
    details = f"{platform.system()} {platform.release()} ({platform.machine()})"
    return CheckResult(check="Platform", status="pass", details=details)


def run_doctor() -> List[Dict[str, Optional[str]]]:
    """
    Execute environment diagnostics and return structured results.

    Returns
    -------
    list of dict
        Each dictionary contains `check`, `status`, and optional `details`.
        Status is one of ``pass``, ``warn``, or ``fail``.
    """

    results: List[CheckResult] = [
        _check_platform(),
        _check_python_version(),
        _check_native_cause(),
    ]

    results.extend(_check_config_file())
    results.append(_check_cause_storage())
    results.append(_check_native_serializer())

    for module in CRITICAL_DEPENDENCIES:
        results.append(_check_dependency(module))

    for module in OPTIONAL_DEPENDENCIES:
        results.append(_check_dependency(module, optional=True))

    # Convert to dictionaries for CLI friendliness.
    return [result.as_dict() for result in results]
