"""
Typed exception hierarchy for the marketing budget kernel.

Every error has its own class, a class-level ``code`` attribute that is
stable and machine-readable, and carries its context as attributes rather
than only inside the message string.  Callers catch by type and read the
structured fields:

    try:
        budget = transition_budget(budget, BudgetStatus.APPROVED)
    except BudgetValidationError as e:
        show_errors([issue.message for issue in e.errors])
    except InvalidStatusTransitionError as e:
        log.warning("bad transition", extra={"code": e.code})

Hierarchy::

    BudgetKernelError
    |
    +-- EntityError
    |   +-- EntityNotFoundError
    |
    +-- BudgetLifecycleError
    |   +-- InvalidStatusTransitionError
    |   +-- BudgetValidationError
    |
    +-- AuditError
    |   +-- AuditLogError
    |
    +-- ImmutabilityError
    |   +-- ImmutabilityViolationError
    |
    +-- ConfigurationError

Codes:

    ENTITY_NOT_FOUND            lookup that requires presence found nothing
    INVALID_STATUS_TRANSITION   lifecycle edge is not allowed
    BUDGET_VALIDATION_FAILED    approval rules failed
    AUDIT_LOG_FAILED            audit store rejected an entry
    IMMUTABILITY_VIOLATION      update/delete attempted on an audit row
    CONFIGURATION_INVALID       configuration value out of range or unknown
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from budget_kernel.domain.lifecycle import ValidationIssue


class BudgetKernelError(Exception):
    """
    Base exception for all budget kernel errors.

    All subclasses must have a ``code`` class attribute for machine-readable
    error identification.
    """

    code: str = "BUDGET_KERNEL_ERROR"


# Entity-related exceptions


class EntityError(BudgetKernelError):
    """Base exception for entity lookup errors."""

    code: str = "ENTITY_ERROR"


class EntityNotFoundError(EntityError):
    """Entity with the given id does not exist."""

    code: str = "ENTITY_NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: int | None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found: {entity_id}")


# Lifecycle exceptions


class BudgetLifecycleError(BudgetKernelError):
    """Base exception for budget status lifecycle errors."""

    code: str = "BUDGET_LIFECYCLE_ERROR"


class InvalidStatusTransitionError(BudgetLifecycleError):
    """The requested status change is not an allowed lifecycle edge."""

    code: str = "INVALID_STATUS_TRANSITION"

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Budget cannot move from {from_status} to {to_status}"
        )


class BudgetValidationError(BudgetLifecycleError):
    """A budget failed the rules required for a status transition."""

    code: str = "BUDGET_VALIDATION_FAILED"

    def __init__(self, errors: tuple[ValidationIssue, ...] | list[ValidationIssue]):
        self.errors = tuple(errors)
        self.rules = [e.rule for e in errors]
        super().__init__(
            "Budget validation failed: " + "; ".join(e.message for e in errors)
        )


# Audit exceptions


class AuditError(BudgetKernelError):
    """Base exception for audit trail errors."""

    code: str = "AUDIT_ERROR"


class AuditLogError(AuditError):
    """
    The audit store failed to record an entry.

    Raised after the underlying data write has already been committed;
    the data change is NOT rolled back.
    """

    code: str = "AUDIT_LOG_FAILED"

    def __init__(self, entity_type: str, entity_id: int | None, action: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.action = action
        super().__init__(
            f"Audit entry for {action} on {entity_type} {entity_id} could not be written"
        )


# Immutability exceptions


class ImmutabilityError(BudgetKernelError):
    """Base exception for immutability violations."""

    code: str = "IMMUTABILITY_ERROR"


class ImmutabilityViolationError(ImmutabilityError):
    """Attempted to modify or delete an append-only record."""

    code: str = "IMMUTABILITY_VIOLATION"

    def __init__(self, entity_type: str, entity_id: str, reason: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.reason = reason
        super().__init__(
            f"Immutability violation on {entity_type} {entity_id}: {reason}"
        )


# Configuration exceptions


class ConfigurationError(BudgetKernelError):
    """A configuration key is unknown or its value is invalid."""

    code: str = "CONFIGURATION_INVALID"

    def __init__(self, key: str, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"Invalid configuration '{key}': {reason}")
