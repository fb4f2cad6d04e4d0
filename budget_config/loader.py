"""
Configuration loader (``budget_config.loader``).

Reads a YAML file into a ``BudgetAppConfig``.  Runtime callers go through
``budget_config.get_active_config()`` instead of calling this directly.

Failure modes:
    - Missing file -> ``FileNotFoundError`` propagates.
    - Malformed YAML -> ``yaml.YAMLError`` propagates.
    - Top level not a mapping, unknown key or invalid value ->
      ``ConfigurationError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from budget_config.schema import BudgetAppConfig
from budget_kernel.exceptions import ConfigurationError


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file; an empty file yields an empty dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_config(path: Path) -> BudgetAppConfig:
    data = load_yaml_file(path)
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return BudgetAppConfig.from_dict(data)
