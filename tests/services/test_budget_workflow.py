"""
Tests for repository-backed budget actions.
"""

from decimal import Decimal

import pytest

from budget_kernel.domain.audit import AuditAction
from budget_kernel.domain.types import (
    BudgetStatus,
    PricingTier,
    PropertySize,
    Service,
    ServiceCategory,
    Suburb,
    VariantSelector,
)
from budget_kernel.exceptions import (
    BudgetValidationError,
    EntityNotFoundError,
    InvalidStatusTransitionError,
)
from budget_services.budget_workflow import change_budget_status, reprice_budget
from tests.conftest import make_budget, make_item, size_variants, tier_variants


class TestChangeBudgetStatus:

    def test_approve_is_audited_as_status_change(self, audited_repo, audit_logger):
        budget = audited_repo.save_budget(
            make_budget(items=(make_item(1, "330"),), schedule_id=1)
        )
        approved = change_budget_status(audited_repo, budget.id, BudgetStatus.APPROVED)

        assert approved.status == BudgetStatus.APPROVED
        entry = audit_logger.get_all(limit=1)[0]
        assert entry.action == AuditAction.STATUS_CHANGE
        assert entry.summary == 'Budget "12 Smith St" status draft → approved'

    def test_unknown_budget(self, audited_repo):
        with pytest.raises(EntityNotFoundError) as exc_info:
            change_budget_status(audited_repo, 99, BudgetStatus.APPROVED)
        assert exc_info.value.entity_id == 99
        assert exc_info.value.code == "ENTITY_NOT_FOUND"

    def test_rejected_approval_saves_nothing(self, audited_repo, audit_logger, repo):
        budget = audited_repo.save_budget(make_budget())
        with pytest.raises(BudgetValidationError):
            change_budget_status(audited_repo, budget.id, BudgetStatus.APPROVED)
        assert repo.get_budget(budget.id).status == BudgetStatus.DRAFT
        assert len(audit_logger.get_all()) == 1

    def test_invalid_edge(self, repo):
        budget = repo.save_budget(make_budget())
        with pytest.raises(InvalidStatusTransitionError):
            change_budget_status(repo, budget.id, BudgetStatus.SENT)


class TestRepriceBudget:

    def _catalogue(self, repo):
        photos = repo.save_service(
            Service(
                name="Photos",
                category=ServiceCategory.PHOTOGRAPHY,
                variant_selector=VariantSelector.PROPERTY_SIZE,
                variants=size_variants(),
            )
        )
        internet = repo.save_service(
            Service(
                name="Internet",
                category=ServiceCategory.INTERNET,
                variant_selector=VariantSelector.SUBURB_TIER,
                variants=tier_variants(),
            )
        )
        suburb = repo.save_suburb(Suburb(name="Toorak", pricing_tier=PricingTier.A))
        return photos, internet, suburb

    def test_reprices_from_size_and_suburb(self, repo):
        photos, internet, suburb = self._catalogue(repo)
        budget = repo.save_budget(
            make_budget(
                property_size=PropertySize.LARGE,
                suburb_id=suburb.id,
                items=(
                    make_item(photos.id, "200"),
                    make_item(internet.id, "900", override="1000"),
                ),
            )
        )

        repriced = reprice_budget(repo, budget.id)

        photo_item, internet_item = repriced.line_items
        assert photo_item.variant_id == "l"
        assert photo_item.schedule_price == Decimal("450")
        assert internet_item.variant_id == "a"
        assert internet_item.schedule_price == Decimal("900")
        assert internet_item.override_price == Decimal("1000")

    def test_no_change_skips_write(self, audited_repo, audit_logger, repo):
        photos, _, _ = self._catalogue(repo)
        budget = audited_repo.save_budget(
            make_budget(property_size=PropertySize.MEDIUM, items=(make_item(photos.id, "200"),))
        )
        reprice_budget(audited_repo, budget.id)
        entries_after_first = len(audit_logger.get_all())

        reprice_budget(audited_repo, budget.id)
        assert len(audit_logger.get_all()) == entries_after_first
