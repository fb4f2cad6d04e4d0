"""
budget_engines.tracer -- BUDGET_ENGINE_TRACE records for engine calls.

``@traced_engine`` wraps a pure engine function and, after every call,
logs which engine ran, its version, how long it took, whether it raised,
and a short fingerprint of the arguments named in
``fingerprint_fields``.  Two calls with equal fingerprinted inputs always
produce the same fingerprint, so traces can be grouped by input.

The logger lives under ``budget_kernel.engines.tracer`` so it inherits
the kernel's JSON handler.  The wrapped function's result and exceptions
pass through untouched.

Usage:
    @traced_engine("pricing", "1.0", fingerprint_fields=("gst_rate",))
    def calculate_budget_summary(line_items, gst_rate=DEFAULT_GST_RATE):
        ...
"""

from __future__ import annotations

import dataclasses
import functools
import hashlib
import inspect
import json
import logging
import time
from collections.abc import Callable
from decimal import Decimal
from enum import Enum
from typing import Any

_logger = logging.getLogger("budget_kernel.engines.tracer")

TRACE_EVENT = "BUDGET_ENGINE_TRACE"


def _plain(value: Any) -> Any:
    """JSON-able stand-in for values json.dumps cannot encode."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Decimal):
        return str(value)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=str)
    return repr(value)


def compute_input_fingerprint(
    fingerprint_fields: tuple[str, ...],
    kwargs: dict[str, Any],
) -> str:
    """
    First 16 hex chars of the SHA-256 of the named arguments.

    Missing fields count as null; dict keys are sorted.
    """
    selected = {name: kwargs.get(name) for name in fingerprint_fields}
    canonical = json.dumps(selected, sort_keys=True, default=_plain, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]


def traced_engine(
    engine_name: str,
    engine_version: str,
    fingerprint_fields: tuple[str, ...] = (),
) -> Callable:
    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            fingerprint = ""
            outcome = "error"
            started = time.perf_counter()
            try:
                if fingerprint_fields:
                    # Positional and defaulted arguments count the same as keywords.
                    bound = signature.bind(*args, **kwargs)
                    bound.apply_defaults()
                    fingerprint = compute_input_fingerprint(fingerprint_fields, bound.arguments)
                result = func(*args, **kwargs)
                outcome = "ok"
                return result
            finally:
                _logger.info(
                    TRACE_EVENT,
                    extra={
                        "trace_type": TRACE_EVENT,
                        "engine_name": engine_name,
                        "engine_version": engine_version,
                        "input_fingerprint": fingerprint,
                        "duration_ms": round((time.perf_counter() - started) * 1000, 3),
                        "outcome": outcome,
                        "function": func.__qualname__,
                    },
                )

        return wrapper

    return decorator
