"""
Aggregation Engine - dashboard rollups over many budgets.

Every aggregate sums the effective price of selected line items only.
Keyed results are zero-filled over the full enumeration so a dashboard
never has to handle a missing key.  The monthly trend is sparse: months
without budgets are omitted.

Usage:
    from budget_engines.aggregation import monthly_spend_trend

    for point in monthly_spend_trend(budgets):
        print(point.month, point.count, point.total)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Sequence

from budget_engines.pricing import effective_price, selected_spend
from budget_engines.tracer import traced_engine
from budget_kernel.domain.types import (
    Budget,
    BudgetStatus,
    BudgetTier,
    Service,
    ServiceCategory,
)

_ZERO = Decimal("0")


@dataclass(frozen=True)
class MonthlySpend:
    """One point of the monthly trend; ``month`` is ``YYYY-MM``."""

    month: str
    total: Decimal
    count: int


@dataclass(frozen=True)
class SpendSummary:
    """Overall spend across budgets."""

    total_budgets: int
    total_spend: Decimal
    average_spend: Decimal


def count_budgets_by_status(budgets: Sequence[Budget]) -> dict[BudgetStatus, int]:
    counts = {status: 0 for status in BudgetStatus}
    for budget in budgets:
        counts[budget.status] += 1
    return counts


@traced_engine("spend_by_category", "1.0")
def total_spend_by_category(
    budgets: Sequence[Budget],
    services: Sequence[Service],
) -> dict[ServiceCategory, Decimal]:
    """
    Selected spend per service category.

    Line items whose service is not in ``services`` are attributed to
    ``other`` rather than dropped.
    """
    category_of = {s.id: s.category for s in services if s.id is not None}
    totals = {category: _ZERO for category in ServiceCategory}
    for budget in budgets:
        for item in budget.line_items:
            if not item.is_selected:
                continue
            category = category_of.get(item.service_id, ServiceCategory.OTHER)
            totals[category] += effective_price(item)
    return totals


def total_spend_by_tier(budgets: Sequence[Budget]) -> dict[BudgetTier, Decimal]:
    totals = {tier: _ZERO for tier in BudgetTier}
    for budget in budgets:
        totals[budget.tier] += selected_spend(budget.line_items)
    return totals


def _utc_month(created_at: datetime) -> str:
    # Naive timestamps are taken to be UTC.
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return created_at.astimezone(timezone.utc).strftime("%Y-%m")


@traced_engine("monthly_spend_trend", "1.0")
def monthly_spend_trend(budgets: Sequence[Budget]) -> list[MonthlySpend]:
    """
    Spend grouped by the month a budget was created, oldest first.

    Budgets without ``created_at`` have no month and are skipped.
    """
    months: dict[str, list] = {}
    for budget in budgets:
        if budget.created_at is None:
            continue
        key = _utc_month(budget.created_at)
        bucket = months.setdefault(key, [_ZERO, 0])
        bucket[0] += selected_spend(budget.line_items)
        bucket[1] += 1

    # Zero-padded YYYY-MM sorts chronologically as a string.
    return [
        MonthlySpend(month=month, total=total, count=count)
        for month, (total, count) in sorted(months.items())
    ]


def overall_spend_summary(budgets: Sequence[Budget]) -> SpendSummary:
    total = sum((selected_spend(b.line_items) for b in budgets), _ZERO)
    count = len(budgets)
    return SpendSummary(
        total_budgets=count,
        total_spend=total,
        average_spend=total / count if count else _ZERO,
    )
