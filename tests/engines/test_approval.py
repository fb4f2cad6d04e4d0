"""
Tests for budget lifecycle transitions and approval rules.
"""

import pytest

from budget_engines.approval import (
    transition_budget,
    validate_for_approval,
    validate_transition,
)
from budget_kernel.domain.lifecycle import can_transition
from budget_kernel.domain.types import BudgetStatus
from budget_kernel.exceptions import (
    BudgetValidationError,
    InvalidStatusTransitionError,
)
from tests.conftest import make_budget, make_item


def _approvable(**kwargs):
    defaults = dict(items=(make_item(1, "300"),), schedule_id=1)
    defaults.update(kwargs)
    return make_budget(**defaults)


class TestLifecycleGraph:

    @pytest.mark.parametrize(
        "src, dst",
        [
            (BudgetStatus.DRAFT, BudgetStatus.APPROVED),
            (BudgetStatus.APPROVED, BudgetStatus.SENT),
            (BudgetStatus.APPROVED, BudgetStatus.DRAFT),
            (BudgetStatus.SENT, BudgetStatus.ARCHIVED),
        ],
    )
    def test_allowed(self, src, dst):
        assert can_transition(src, dst)

    @pytest.mark.parametrize(
        "src, dst",
        [
            (BudgetStatus.DRAFT, BudgetStatus.SENT),
            (BudgetStatus.SENT, BudgetStatus.DRAFT),
            (BudgetStatus.ARCHIVED, BudgetStatus.DRAFT),
            (BudgetStatus.DRAFT, BudgetStatus.DRAFT),
        ],
    )
    def test_forbidden(self, src, dst):
        assert not can_transition(src, dst)


class TestApprovalRules:

    def test_complete_budget_is_valid(self):
        assert validate_for_approval(_approvable()).is_valid

    def test_collects_every_failure(self):
        result = validate_for_approval(make_budget(address="  "))
        assert [e.rule for e in result.errors] == [
            "address_required",
            "line_items_required",
            "selected_items_required",
            "schedule_required",
        ]

    def test_nothing_selected(self):
        budget = _approvable(items=(make_item(1, "300", selected=False),))
        assert [e.rule for e in validate_for_approval(budget).errors] == [
            "selected_items_required",
        ]

    def test_unpriced_item_message_singular(self):
        budget = _approvable(items=(make_item(1, "300"), make_item(2)))
        (issue,) = validate_for_approval(budget).errors
        assert issue.rule == "item_prices_required"
        assert issue.message.startswith("1 selected line item has no price")

    def test_unpriced_item_message_plural(self):
        budget = _approvable(items=(make_item(1, "0"), make_item(2)))
        (issue,) = validate_for_approval(budget).errors
        assert issue.message.startswith("2 selected line items have no price")

    def test_override_counts_as_price(self):
        budget = _approvable(items=(make_item(1, "0", override="50"),))
        assert validate_for_approval(budget).is_valid

    def test_other_edges_skip_validation(self):
        result = validate_transition(
            make_budget(), BudgetStatus.APPROVED, BudgetStatus.SENT,
        )
        assert result.is_valid


class TestTransitionBudget:

    def test_approves_complete_draft(self):
        budget = _approvable()
        approved = transition_budget(budget, BudgetStatus.APPROVED)
        assert approved.status == BudgetStatus.APPROVED
        assert budget.status == BudgetStatus.DRAFT

    def test_invalid_edge_raises(self):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            transition_budget(make_budget(), BudgetStatus.ARCHIVED)
        assert exc_info.value.from_status == "draft"
        assert exc_info.value.to_status == "archived"
        assert exc_info.value.code == "INVALID_STATUS_TRANSITION"

    def test_incomplete_draft_raises_with_rules(self, captured_logs):
        with pytest.raises(BudgetValidationError) as exc_info:
            transition_budget(make_budget(schedule_id=1), BudgetStatus.APPROVED)
        assert "line_items_required" in exc_info.value.rules

        rejected = [r for r in captured_logs() if r["message"] == "budget_transition_rejected"]
        assert rejected[0]["to_status"] == "approved"

    def test_revert_to_draft_needs_no_validation(self):
        budget = make_budget(status=BudgetStatus.APPROVED)
        assert transition_budget(budget, BudgetStatus.DRAFT).status == BudgetStatus.DRAFT
