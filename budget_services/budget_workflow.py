"""
Budget workflow -- repository-backed budget actions.

Responsibility:
    Loads a budget, runs the pure engines over it and saves the result
    through whatever ``BudgetRepository`` it is given.  Pass an
    ``AuditedBudgetRepository`` to get the audit trail for free.

    change_budget_status  lifecycle edge plus approval rules, then save
    reprice_budget        re-resolve line items against the current
                          catalogue and suburb tier; save only on change

Failure modes:
    - ``EntityNotFoundError`` when the budget id is unknown.
    - ``InvalidStatusTransitionError`` / ``BudgetValidationError`` from the
      approval rules; nothing is saved.
"""

from __future__ import annotations

import dataclasses

from budget_engines.approval import transition_budget
from budget_engines.pricing import refresh_line_items
from budget_engines.variants import context_for_budget
from budget_kernel.domain.types import Budget, BudgetStatus
from budget_kernel.logging_config import LogContext, get_logger
from budget_kernel.services.repository import BudgetRepository

logger = get_logger("services.budget_workflow")


def change_budget_status(
    repo: BudgetRepository,
    budget_id: int,
    to_status: BudgetStatus,
) -> Budget:
    """Move a stored budget to ``to_status`` and persist it."""
    budget = repo.require_budget(budget_id)
    with LogContext.bind(entity_type="budget", entity_id=str(budget_id)):
        moved = transition_budget(budget, BudgetStatus(to_status))
        saved = repo.save_budget(moved)
        logger.info(
            "budget_status_changed",
            extra={"from_status": budget.status.value, "to_status": saved.status.value},
        )
    return saved


def reprice_budget(repo: BudgetRepository, budget_id: int) -> Budget:
    """
    Refresh service names, variants and schedule prices of a stored budget.

    Overrides and selections are kept.  When nothing changes the stored
    budget is returned and no write happens.
    """
    budget = repo.require_budget(budget_id)
    context = context_for_budget(budget, repo.get_suburbs())
    line_items, changed = refresh_line_items(
        budget.line_items, repo.get_all_services(), context,
    )
    if not changed:
        return budget
    return repo.save_budget(dataclasses.replace(budget, line_items=tuple(line_items)))
