"""
Line-Item Pricing Engine - effective prices, budget totals and re-resolution.

Prices in a budget are GST-inclusive by convention.  The tax component is
extracted from the gross rather than added on top:

    gst = total - total / (1 + rate)

Only the reported ``gst`` field is rounded (2 dp, half-up); sums stay at
full precision.

Usage:
    from budget_engines.pricing import calculate_budget_summary

    summary = calculate_budget_summary(budget.line_items)
    print(summary.total, summary.gst)   # 330  30.00
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from budget_engines.tracer import traced_engine
from budget_engines.variants import resolve_variant
from budget_kernel.domain.types import LineItem, ResolutionContext, Service
from budget_kernel.logging_config import get_logger

logger = get_logger("engines.pricing")

DEFAULT_GST_RATE = Decimal("0.1")
_ZERO = Decimal("0")
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class BudgetSummary:
    """Counts and tax-inclusive totals for a list of line items."""

    selected_count: int
    total_count: int
    subtotal: Decimal
    gst: Decimal
    total: Decimal


def effective_price(line_item: LineItem) -> Decimal:
    """
    The price of record for a line item.

    An override, once set, wins over the schedule price regardless of
    later context changes.  Missing prices count as zero.
    """
    if line_item.is_overridden and line_item.override_price is not None:
        return line_item.override_price
    if line_item.schedule_price is not None:
        return line_item.schedule_price
    return _ZERO


def selected_spend(line_items: Sequence[LineItem]) -> Decimal:
    """Sum of effective prices of the selected items."""
    return sum(
        (effective_price(li) for li in line_items if li.is_selected),
        _ZERO,
    )


def extract_inclusive_tax(gross: Decimal, rate: Decimal = DEFAULT_GST_RATE) -> Decimal:
    """Tax component of a tax-inclusive amount, at full precision."""
    if gross == _ZERO:
        return _ZERO
    return gross - gross / (Decimal("1") + rate)


@traced_engine("pricing", "1.0", fingerprint_fields=("gst_rate",))
def calculate_budget_summary(
    line_items: Sequence[LineItem],
    gst_rate: Decimal = DEFAULT_GST_RATE,
) -> BudgetSummary:
    """Aggregate line items into counts, total and extracted GST."""
    total = selected_spend(line_items)
    gst = extract_inclusive_tax(total, gst_rate).quantize(_CENT, rounding=ROUND_HALF_UP)
    return BudgetSummary(
        selected_count=sum(1 for li in line_items if li.is_selected),
        total_count=len(line_items),
        subtotal=total,
        gst=gst,
        total=total,
    )


@traced_engine("line_item_resolution", "1.0", fingerprint_fields=("context",))
def resolve_line_items(
    line_items: Sequence[LineItem],
    services: Sequence[Service],
    context: ResolutionContext,
) -> tuple[LineItem, ...]:
    """
    Re-resolve every line item against the catalogue and a new context.

    Refreshes service name, variant id/name and, for items that are not
    overridden, the schedule price.  Selection and override fields are
    never touched.  Items whose service is unknown pass through unchanged,
    and items that come out equal are returned as the same instance.
    """
    by_id = {s.id: s for s in services}
    resolved: list[LineItem] = []
    for item in line_items:
        service = by_id.get(item.service_id)
        if service is None:
            resolved.append(item)
            continue

        variant = resolve_variant(service, context, item.variant_id)
        if item.is_overridden:
            schedule_price = item.schedule_price
        else:
            schedule_price = variant.base_price if variant is not None else None

        updated = dataclasses.replace(
            item,
            service_name=service.name,
            variant_id=variant.id if variant is not None else None,
            variant_name=variant.name if variant is not None else None,
            schedule_price=schedule_price,
        )
        resolved.append(item if updated == item else updated)
    return tuple(resolved)


def refresh_line_items(
    line_items: Sequence[LineItem],
    services: Sequence[Service],
    context: ResolutionContext,
) -> tuple[Sequence[LineItem], bool]:
    """
    Re-resolve and report whether anything changed.

    Returns the original ``line_items`` and False when re-resolution is a
    no-op, so a reactive caller only replaces its state on a real change.
    """
    resolved = resolve_line_items(line_items, services, context)
    changed = len(resolved) != len(line_items) or any(
        new is not old for new, old in zip(resolved, line_items)
    )
    if not changed:
        return line_items, False
    logger.debug(
        "line_items_refreshed",
        extra={"changed_count": sum(1 for n, o in zip(resolved, line_items) if n is not o)},
    )
    return resolved, True
