"""
Tests for snapshot projection and rehydration of domain entities.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from budget_kernel.domain.snapshots import (
    budget_from_dict,
    data_export_from_dict,
    service_from_dict,
    snapshot,
    to_json,
)
from budget_kernel.domain.types import (
    BudgetStatus,
    DataExport,
    IncludedService,
    LineItem,
    PricingTier,
    PropertySize,
    Service,
    ServiceCategory,
    Variant,
    VariantSelector,
    Vendor,
    new_budget,
)
from tests.conftest import make_budget, make_item


class TestSnapshot:

    def test_enums_become_values(self):
        snap = snapshot(make_budget(status=BudgetStatus.APPROVED))
        assert snap["status"] == "approved"
        assert snap["property_type"] == "house"

    def test_keeps_field_order(self):
        assert list(snapshot(Vendor(name="Acme")))[:2] == ["name", "id"]

    def test_line_items_become_list_of_dicts(self):
        snap = snapshot(make_budget(items=(make_item(1, "100"),)))
        assert snap["line_items"] == [
            {
                "service_id": 1,
                "service_name": None,
                "variant_id": None,
                "variant_name": None,
                "is_selected": True,
                "schedule_price": Decimal("100"),
                "override_price": None,
                "is_overridden": False,
            }
        ]

    def test_json_safe_renders_decimals_as_strings(self):
        snap = snapshot(make_item(1, "99.95"), json_safe=True)
        assert snap["schedule_price"] == "99.95"

    def test_datetimes_become_iso_strings(self):
        created = datetime(2026, 2, 3, 4, 5, 6, tzinfo=timezone.utc)
        assert snapshot(make_budget(created_at=created))["created_at"] == created.isoformat()

    def test_to_json_is_parseable(self):
        payload = json.loads(to_json(make_budget(items=(make_item(1, "10.50"),))))
        assert payload["line_items"][0]["schedule_price"] == "10.50"


class TestRehydration:

    def test_budget_round_trip_through_json(self):
        budget = make_budget(
            id=4,
            items=(make_item(1, "100", override="80", service_name="Photos"),),
            status=BudgetStatus.SENT,
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        )
        restored = budget_from_dict(json.loads(to_json(budget)))
        assert restored == budget

    def test_service_with_package_variant(self):
        service = Service(
            id=3,
            name="Internet package",
            category=ServiceCategory.INTERNET,
            variant_selector=VariantSelector.SUBURB_TIER,
            variants=(
                Variant(
                    id="a",
                    name="Tier A",
                    base_price=Decimal("1500"),
                    tier_match=PricingTier.A,
                    included_services=(IncludedService(service_id=1, service_name="Photos"),),
                ),
            ),
        )
        assert service_from_dict(json.loads(to_json(service))) == service

    def test_negative_variant_price_rejected(self):
        with pytest.raises(ValueError):
            Variant(id="x", name="X", base_price=Decimal("-1"))

    def test_variant_with_two_match_kinds_rejected(self):
        with pytest.raises(ValueError):
            Variant(
                id="x",
                name="X",
                base_price=Decimal("10"),
                size_match=PropertySize.SMALL,
                tier_match=PricingTier.A,
            )

    def test_unknown_enum_rejected(self):
        with pytest.raises(ValueError):
            budget_from_dict({"property_address": "1 A St", "status": "pending"})

    def test_export_envelope(self):
        export = DataExport(
            vendors=(Vendor(id=1, name="Acme"),),
            budgets=(make_budget(id=2, items=(LineItem(service_id=1),)),),
        )
        restored = data_export_from_dict(json.loads(to_json(export)))
        assert restored.vendors == export.vendors
        assert restored.budgets == export.budgets
        assert restored.export_version == "1.0"


class TestNewBudget:

    def test_defaults(self):
        budget = new_budget(vendor_id=7)
        assert budget.status == BudgetStatus.DRAFT
        assert budget.property_address == ""
        assert budget.vendor_id == 7
        assert budget.line_items == ()
