"""
Tests for the line-item pricing engine.

Covers:
- Effective price: override vs schedule price vs missing
- Budget summary totals and GST extraction
- Re-resolution of line items when the context changes
- Trace logging of engine calls
"""

from decimal import Decimal

from budget_engines.pricing import (
    BudgetSummary,
    calculate_budget_summary,
    effective_price,
    extract_inclusive_tax,
    refresh_line_items,
    resolve_line_items,
    selected_spend,
)
from budget_kernel.domain.types import (
    LineItem,
    PropertySize,
    ResolutionContext,
    VariantSelector,
)
from tests.conftest import make_item, make_service, size_variants, tier_variants


class TestEffectivePrice:

    def test_schedule_price(self):
        assert effective_price(make_item(1, "120")) == Decimal("120")

    def test_override_wins(self):
        assert effective_price(make_item(1, "120", override="99.50")) == Decimal("99.50")

    def test_override_flag_without_amount_uses_schedule_price(self):
        item = LineItem(service_id=1, schedule_price=Decimal("80"), is_overridden=True)
        assert effective_price(item) == Decimal("80")

    def test_override_amount_without_flag_is_ignored(self):
        item = LineItem(
            service_id=1, schedule_price=Decimal("80"), override_price=Decimal("10"),
        )
        assert effective_price(item) == Decimal("80")

    def test_missing_prices_are_zero(self):
        assert effective_price(LineItem(service_id=1)) == Decimal("0")

    def test_selected_spend_skips_deselected(self):
        items = [make_item(1, "100"), make_item(2, "50", selected=False)]
        assert selected_spend(items) == Decimal("100")


class TestBudgetSummary:

    def test_tax_extraction(self):
        summary = calculate_budget_summary([make_item(1, "330")])
        assert summary.subtotal == Decimal("330")
        assert summary.total == Decimal("330")
        assert summary.gst == Decimal("30.00")

    def test_empty_is_all_zero(self):
        summary = calculate_budget_summary([])
        assert summary == BudgetSummary(
            selected_count=0,
            total_count=0,
            subtotal=Decimal("0"),
            gst=Decimal("0"),
            total=Decimal("0"),
        )

    def test_counts(self):
        items = [make_item(1, "100"), make_item(2, "200", selected=False), make_item(3)]
        summary = calculate_budget_summary(items)
        assert summary.selected_count == 2
        assert summary.total_count == 3
        assert summary.total == Decimal("100")

    def test_gst_rounds_half_up(self):
        # 0.55 / 11 = 0.05
        summary = calculate_budget_summary([make_item(1, "0.55")])
        assert summary.gst == Decimal("0.05")
        # 100 / 11 = 9.0909...
        assert calculate_budget_summary([make_item(1, "100")]).gst == Decimal("9.09")

    def test_custom_rate(self):
        summary = calculate_budget_summary([make_item(1, "115")], gst_rate=Decimal("0.15"))
        assert summary.gst == Decimal("15.00")

    def test_extract_inclusive_tax_full_precision(self):
        tax = extract_inclusive_tax(Decimal("100"))
        assert tax > Decimal("9.0909")
        assert tax < Decimal("9.091")

    def test_emits_engine_trace(self, captured_logs):
        calculate_budget_summary([make_item(1, "330")], gst_rate=Decimal("0.1"))
        traces = [r for r in captured_logs() if r["message"] == "BUDGET_ENGINE_TRACE"]
        assert traces
        assert traces[-1]["engine_name"] == "pricing"
        assert len(traces[-1]["input_fingerprint"]) == 16


class TestResolveLineItems:

    def setup_method(self):
        self.service = make_service(
            selector=VariantSelector.PROPERTY_SIZE, variants=size_variants(),
        )
        self.small = ResolutionContext(property_size=PropertySize.SMALL)
        self.large = ResolutionContext(property_size=PropertySize.LARGE)

    def test_context_change_reprices(self):
        (item,) = resolve_line_items([make_item(1, "200")], [self.service], self.large)
        assert item.variant_id == "l"
        assert item.variant_name == "Large"
        assert item.schedule_price == Decimal("450")
        assert item.service_name == "Photography"

    def test_override_survives_context_change(self):
        original = make_item(1, "200", override="999")
        (item,) = resolve_line_items([original], [self.service], self.large)
        assert item.schedule_price == Decimal("200")
        assert item.override_price == Decimal("999")
        assert item.is_overridden
        assert effective_price(item) == Decimal("999")
        assert item.variant_id == "l"

    def test_selection_is_preserved(self):
        (item,) = resolve_line_items(
            [make_item(1, "200", selected=False)], [self.service], self.large,
        )
        assert not item.is_selected

    def test_unknown_service_passes_through(self):
        original = make_item(42, "10")
        (item,) = resolve_line_items([original], [self.service], self.large)
        assert item is original

    def test_unchanged_item_is_same_instance(self):
        original = LineItem(
            service_id=1,
            service_name="Photography",
            variant_id="s",
            variant_name="Small",
            schedule_price=Decimal("200"),
        )
        (item,) = resolve_line_items([original], [self.service], self.small)
        assert item is original

    def test_no_match_clears_variant_and_price(self):
        tiered = make_service(selector=VariantSelector.SUBURB_TIER, variants=tier_variants())
        (item,) = resolve_line_items([make_item(1, "1500")], [tiered], self.small)
        assert item.variant_id is None
        assert item.variant_name is None
        assert item.schedule_price is None
        assert effective_price(item) == Decimal("0")


class TestRefreshLineItems:

    def test_no_change_returns_original_sequence(self):
        service = make_service(variants=size_variants())
        items = [
            LineItem(
                service_id=1,
                service_name="Photography",
                variant_id="s",
                variant_name="Small",
                schedule_price=Decimal("200"),
            ),
        ]
        result, changed = refresh_line_items(items, [service], ResolutionContext())
        assert changed is False
        assert result is items

    def test_change_is_reported(self):
        service = make_service(
            selector=VariantSelector.PROPERTY_SIZE, variants=size_variants(),
        )
        items = [make_item(1, "200")]
        result, changed = refresh_line_items(
            items, [service], ResolutionContext(property_size=PropertySize.MEDIUM),
        )
        assert changed is True
        assert result[0].schedule_price == Decimal("300")
