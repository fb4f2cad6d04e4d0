"""Storage contracts and their SQLAlchemy implementations."""

from budget_kernel.services.audit_logger import AuditLogger, SqlAuditLogger
from budget_kernel.services.repository import BudgetFilters, BudgetRepository
from budget_kernel.services.sql_repository import SqlBudgetRepository

__all__ = [
    "AuditLogger",
    "BudgetFilters",
    "BudgetRepository",
    "SqlAuditLogger",
    "SqlBudgetRepository",
]
