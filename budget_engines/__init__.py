"""
Module: budget_engines
Responsibility:
    Re-exports the pure calculation engines: variant resolution, pricing,
    dashboard aggregation, change diffing and approval rules.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May import budget_kernel.domain, budget_kernel.exceptions and
    budget_kernel.logging_config.  MUST NOT import budget_services.

Invariants enforced:
    - Engines never read the clock; timestamps arrive on the inputs.
    - Decimal-only arithmetic for money.
    - Identical inputs always produce identical outputs.
"""

from budget_engines.aggregation import (
    MonthlySpend,
    SpendSummary,
    count_budgets_by_status,
    monthly_spend_trend,
    overall_spend_summary,
    total_spend_by_category,
    total_spend_by_tier,
)
from budget_engines.approval import (
    transition_budget,
    validate_for_approval,
    validate_transition,
)
from budget_engines.diff import (
    diff_changes,
    diff_line_items,
    display_value,
    format_field_name,
    summarise_changes,
)
from budget_engines.pricing import (
    DEFAULT_GST_RATE,
    BudgetSummary,
    calculate_budget_summary,
    effective_price,
    extract_inclusive_tax,
    refresh_line_items,
    resolve_line_items,
    selected_spend,
)
from budget_engines.variants import (
    context_for_budget,
    has_auto_variants,
    has_selectable_variants,
    resolve_variant,
    variant_price,
)

__all__ = [
    "MonthlySpend",
    "SpendSummary",
    "count_budgets_by_status",
    "monthly_spend_trend",
    "overall_spend_summary",
    "total_spend_by_category",
    "total_spend_by_tier",
    "transition_budget",
    "validate_for_approval",
    "validate_transition",
    "diff_changes",
    "diff_line_items",
    "display_value",
    "format_field_name",
    "summarise_changes",
    "DEFAULT_GST_RATE",
    "BudgetSummary",
    "calculate_budget_summary",
    "effective_price",
    "extract_inclusive_tax",
    "refresh_line_items",
    "resolve_line_items",
    "selected_spend",
    "context_for_budget",
    "has_auto_variants",
    "has_selectable_variants",
    "resolve_variant",
    "variant_price",
]
