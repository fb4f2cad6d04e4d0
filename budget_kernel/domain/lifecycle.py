"""
Budget lifecycle -- the status graph and validation result types.

Budgets are created in ``draft``.  The only allowed edges are::

    draft -> approved -> sent -> archived
                 |
                 +-> draft   (explicit revert)

``archived`` is terminal.  Rule evaluation lives in
``budget_engines.approval``; this module holds the data it works with.
"""

from dataclasses import dataclass

from budget_kernel.domain.types import BudgetStatus

ALLOWED_TRANSITIONS: dict[BudgetStatus, frozenset[BudgetStatus]] = {
    BudgetStatus.DRAFT: frozenset({BudgetStatus.APPROVED}),
    BudgetStatus.APPROVED: frozenset({BudgetStatus.SENT, BudgetStatus.DRAFT}),
    BudgetStatus.SENT: frozenset({BudgetStatus.ARCHIVED}),
    BudgetStatus.ARCHIVED: frozenset(),
}


def can_transition(from_status: BudgetStatus, to_status: BudgetStatus) -> bool:
    """True if ``from_status -> to_status`` is an edge of the lifecycle."""
    return to_status in ALLOWED_TRANSITIONS.get(from_status, frozenset())


@dataclass(frozen=True)
class ValidationIssue:
    """A single failed rule: machine-readable key plus message."""
    rule: str
    message: str


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of validating a budget for a status transition."""
    errors: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors
