"""
budget_services -- orchestration above budget_kernel and budget_engines.

May import both lower layers; nothing below imports from here.
"""

from budget_services.audited_repository import AuditedBudgetRepository
from budget_services.budget_workflow import change_budget_status, reprice_budget

__all__ = ["AuditedBudgetRepository", "change_budget_status", "reprice_budget"]
