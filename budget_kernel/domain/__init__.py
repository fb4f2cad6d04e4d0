"""Pure domain layer: value objects and data-only helpers, zero I/O."""

from budget_kernel.domain.audit import (
    AuditAction,
    AuditFailurePolicy,
    AuditEntityType,
    AuditEntry,
    FieldChange,
)
from budget_kernel.domain.types import (
    Budget,
    BudgetStatus,
    BudgetTier,
    DataExport,
    IncludedService,
    LineItem,
    PricingTier,
    PropertySize,
    PropertyType,
    ResolutionContext,
    Schedule,
    ScheduleLineItem,
    Service,
    ServiceCategory,
    Suburb,
    Variant,
    VariantSelector,
    Vendor,
    new_budget,
)

__all__ = [
    "AuditAction",
    "AuditFailurePolicy",
    "AuditEntityType",
    "AuditEntry",
    "FieldChange",
    "Budget",
    "BudgetStatus",
    "BudgetTier",
    "DataExport",
    "IncludedService",
    "LineItem",
    "PricingTier",
    "PropertySize",
    "PropertyType",
    "ResolutionContext",
    "Schedule",
    "ScheduleLineItem",
    "Service",
    "ServiceCategory",
    "Suburb",
    "Variant",
    "VariantSelector",
    "Vendor",
    "new_budget",
]
