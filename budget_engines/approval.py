"""
Approval rules - completeness checks gating the budget lifecycle.

Before a budget moves ``draft -> approved`` it must have:

    address_required         a non-blank property address
    line_items_required      at least one line item
    selected_items_required  at least one selected line item
    item_prices_required     a positive effective price on every selected item
    schedule_required        a linked schedule

Every other allowed edge needs no extra validation.  ``transition_budget``
combines the edge check from ``budget_kernel.domain.lifecycle`` with these
rules and returns the budget in its new status.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable

from budget_engines.pricing import effective_price
from budget_kernel.domain.lifecycle import (
    ValidationIssue,
    ValidationResult,
    can_transition,
)
from budget_kernel.domain.types import Budget, BudgetStatus
from budget_kernel.exceptions import (
    BudgetValidationError,
    InvalidStatusTransitionError,
)
from budget_kernel.logging_config import get_logger

logger = get_logger("engines.approval")


def validate_address(budget: Budget) -> ValidationIssue | None:
    if not budget.property_address or not budget.property_address.strip():
        return ValidationIssue("address_required", "Property address is required.")
    return None


def validate_has_line_items(budget: Budget) -> ValidationIssue | None:
    if not budget.line_items:
        return ValidationIssue(
            "line_items_required", "Budget must have at least one line item."
        )
    return None


def validate_selected_items(budget: Budget) -> ValidationIssue | None:
    if not any(li.is_selected for li in budget.line_items):
        return ValidationIssue(
            "selected_items_required", "At least one line item must be selected."
        )
    return None


def validate_item_prices(budget: Budget) -> ValidationIssue | None:
    unpriced = [
        li for li in budget.line_items
        if li.is_selected and effective_price(li) <= 0
    ]
    if not unpriced:
        return None
    count = len(unpriced)
    if count == 1:
        message = "1 selected line item has no price. Set a price or deselect it."
    else:
        message = (
            f"{count} selected line items have no price. "
            "Set a price or deselect them."
        )
    return ValidationIssue("item_prices_required", message)


def validate_schedule(budget: Budget) -> ValidationIssue | None:
    if budget.schedule_id is None:
        return ValidationIssue(
            "schedule_required", "A schedule template must be selected."
        )
    return None


APPROVAL_RULES: tuple[Callable[[Budget], ValidationIssue | None], ...] = (
    validate_address,
    validate_has_line_items,
    validate_selected_items,
    validate_item_prices,
    validate_schedule,
)


def validate_for_approval(budget: Budget) -> ValidationResult:
    """Run every approval rule and collect all failures."""
    issues = (rule(budget) for rule in APPROVAL_RULES)
    return ValidationResult(errors=tuple(i for i in issues if i is not None))


def validate_transition(
    budget: Budget,
    from_status: BudgetStatus,
    to_status: BudgetStatus,
) -> ValidationResult:
    """Full validation for draft -> approved; every other edge passes."""
    if from_status == BudgetStatus.DRAFT and to_status == BudgetStatus.APPROVED:
        return validate_for_approval(budget)
    return ValidationResult()


def transition_budget(budget: Budget, to_status: BudgetStatus) -> Budget:
    """
    Return ``budget`` moved to ``to_status``.

    Raises:
        InvalidStatusTransitionError: the edge is not in the lifecycle.
        BudgetValidationError: the budget fails the rules for this edge.
    """
    from_status = budget.status
    if not can_transition(from_status, to_status):
        raise InvalidStatusTransitionError(from_status.value, to_status.value)

    result = validate_transition(budget, from_status, to_status)
    if not result.is_valid:
        logger.info(
            "budget_transition_rejected",
            extra={
                "budget_id": budget.id,
                "from_status": from_status.value,
                "to_status": to_status.value,
                "rules": [e.rule for e in result.errors],
            },
        )
        raise BudgetValidationError(result.errors)

    return dataclasses.replace(budget, status=to_status)
