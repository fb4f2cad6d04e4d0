"""
Configuration schema (``budget_config.schema``).

``BudgetAppConfig`` is the frozen runtime configuration.  Values are
validated in ``__post_init__``; any invalid value raises
``ConfigurationError`` naming the offending key.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from budget_kernel.domain.audit import AuditFailurePolicy
from budget_kernel.exceptions import ConfigurationError


@dataclass(frozen=True)
class BudgetAppConfig:
    """Runtime settings for the marketing budget core."""

    database_url: str = "sqlite:///marketing_budgets.db"
    gst_rate: Decimal = Decimal("0.1")
    audit_user: str = "system"
    audit_failure_policy: AuditFailurePolicy = AuditFailurePolicy.PROPAGATE
    summary_max_fields: int = 4
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.database_url:
            raise ConfigurationError("database_url", "must not be empty")
        if not isinstance(self.gst_rate, Decimal):
            raise ConfigurationError("gst_rate", "must be a Decimal")
        if not (Decimal("0") <= self.gst_rate < Decimal("1")):
            raise ConfigurationError("gst_rate", f"must be in [0, 1), got {self.gst_rate}")
        if not self.audit_user:
            raise ConfigurationError("audit_user", "must not be empty")
        if not isinstance(self.audit_failure_policy, AuditFailurePolicy):
            raise ConfigurationError("audit_failure_policy", "must be an AuditFailurePolicy")
        if self.summary_max_fields < 1:
            raise ConfigurationError(
                "summary_max_fields", f"must be at least 1, got {self.summary_max_fields}"
            )
        if self.log_level.upper() not in logging.getLevelNamesMapping():
            raise ConfigurationError("log_level", f"unknown level {self.log_level!r}")

    @classmethod
    def with_defaults(cls) -> BudgetAppConfig:
        return cls()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> BudgetAppConfig:
        """
        Build a config from a parsed YAML mapping.

        Missing keys take their defaults; unknown keys are rejected.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(unknown[0], "unknown configuration key")

        kwargs = dict(data)
        if "gst_rate" in kwargs:
            try:
                kwargs["gst_rate"] = Decimal(str(kwargs["gst_rate"]))
            except InvalidOperation as exc:
                raise ConfigurationError("gst_rate", "not a number") from exc
        if "audit_failure_policy" in kwargs:
            try:
                kwargs["audit_failure_policy"] = AuditFailurePolicy(
                    str(kwargs["audit_failure_policy"]).lower()
                )
            except ValueError as exc:
                raise ConfigurationError(
                    "audit_failure_policy",
                    f"expected one of {[p.value for p in AuditFailurePolicy]}",
                ) from exc
        if "summary_max_fields" in kwargs:
            try:
                kwargs["summary_max_fields"] = int(kwargs["summary_max_fields"])
            except (TypeError, ValueError) as exc:
                raise ConfigurationError("summary_max_fields", "not an integer") from exc
        for key in ("database_url", "audit_user", "log_level"):
            if key in kwargs:
                kwargs[key] = str(kwargs[key])
        return cls(**kwargs)
