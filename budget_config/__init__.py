"""
budget_config -- single public entrypoint for runtime configuration.

Responsibility:
    ``get_active_config()`` is the only way to obtain configuration at
    runtime.  It loads a YAML file (the packaged ``defaults.yaml`` unless a
    path is given) into a validated, frozen ``BudgetAppConfig``.

Architecture position:
    Configuration -- sits above ``budget_kernel``.  The kernel MUST NEVER
    import from ``budget_config``; ``budget_config.bridges`` turns a config
    into kernel and service objects.

Failure modes:
    - ``FileNotFoundError`` -- the config file does not exist.
    - ``ConfigurationError`` -- unknown key or invalid value.

Audit relevance:
    Every successful call emits a ``BUDGET_CONFIG_TRACE`` log entry with the
    source path and the effective settings (minus the database URL).
"""

from __future__ import annotations

import logging
from pathlib import Path

from budget_config.loader import load_config
from budget_config.schema import BudgetAppConfig

_logger = logging.getLogger("budget_kernel.config")

DEFAULT_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"


def get_active_config(config_path: Path | str | None = None) -> BudgetAppConfig:
    """
    Load and validate the active configuration.

    Args:
        config_path: YAML file to read.  Defaults to the packaged
            ``defaults.yaml``.

    Returns:
        BudgetAppConfig -- frozen and validated.
    """
    path = Path(config_path) if config_path is not None else DEFAULT_CONFIG_PATH
    config = load_config(path)

    _logger.info(
        "BUDGET_CONFIG_TRACE",
        extra={
            "trace_type": "BUDGET_CONFIG_TRACE",
            "config_path": str(path),
            "gst_rate": str(config.gst_rate),
            "audit_failure_policy": config.audit_failure_policy.value,
            "summary_max_fields": config.summary_max_fields,
        },
    )
    return config


__all__ = ["BudgetAppConfig", "DEFAULT_CONFIG_PATH", "get_active_config"]
