"""
Variant Resolver - pick the priced variant of a service that applies.

A service carries one or more priced variants and a selector rule:

    None          single default variant, context ignored
    manual        the user picks; fall back to the first variant
    propertySize  first variant whose size_match equals the budget's size
    suburbTier    first variant whose tier_match equals the suburb's tier

Auto-selecting services return None when nothing matches, so the caller
can show a dash instead of a wrong price.

Usage:
    from budget_engines.variants import resolve_variant, context_for_budget

    context = context_for_budget(budget, suburbs)
    variant = resolve_variant(service, context, line_item.variant_id)
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from budget_kernel.domain.types import (
    Budget,
    ResolutionContext,
    Service,
    Suburb,
    Variant,
    VariantSelector,
)

_AUTO_SELECTORS = frozenset({VariantSelector.PROPERTY_SIZE, VariantSelector.SUBURB_TIER})


def resolve_variant(
    service: Service,
    context: ResolutionContext,
    requested_variant_id: str | None = None,
) -> Variant | None:
    """Return the variant that applies to ``service`` in ``context``."""
    variants = service.variants
    if not variants:
        return None

    selector = service.variant_selector
    if selector is None or len(variants) == 1:
        return variants[0]

    if selector == VariantSelector.MANUAL:
        if requested_variant_id is not None:
            for v in variants:
                if v.id == requested_variant_id:
                    return v
        return variants[0]

    if selector == VariantSelector.PROPERTY_SIZE:
        return next(
            (v for v in variants if v.size_match == context.property_size), None
        )

    if selector == VariantSelector.SUBURB_TIER:
        return next(
            (v for v in variants if v.tier_match == context.suburb_tier), None
        )

    return None


def has_selectable_variants(service: Service) -> bool:
    """True when the user chooses the variant (render a picker)."""
    return service.variant_selector == VariantSelector.MANUAL


def has_auto_variants(service: Service) -> bool:
    """True when the variant follows property size or suburb tier."""
    return service.variant_selector in _AUTO_SELECTORS and len(service.variants) > 1


def variant_price(
    service: Service,
    context: ResolutionContext,
    variant_id: str | None = None,
) -> Decimal:
    """Base price of the resolved variant, zero when none resolves."""
    variant = resolve_variant(service, context, variant_id)
    return variant.base_price if variant is not None else Decimal("0")


def context_for_budget(budget: Budget, suburbs: Sequence[Suburb]) -> ResolutionContext:
    """Derive the resolution context from a budget's size and its suburb's tier."""
    tier = None
    if budget.suburb_id is not None:
        suburb = next((s for s in suburbs if s.id == budget.suburb_id), None)
        if suburb is not None:
            tier = suburb.pricing_tier
    return ResolutionContext(property_size=budget.property_size, suburb_tier=tier)
