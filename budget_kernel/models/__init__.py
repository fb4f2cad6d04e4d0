"""ORM models for the marketing budget kernel."""

from budget_kernel.models.audit_entry import AuditEntryModel
from budget_kernel.models.budget import BudgetModel
from budget_kernel.models.catalog import (
    ScheduleModel,
    ServiceModel,
    SuburbModel,
    VendorModel,
)

__all__ = [
    "AuditEntryModel",
    "BudgetModel",
    "ScheduleModel",
    "ServiceModel",
    "SuburbModel",
    "VendorModel",
]
