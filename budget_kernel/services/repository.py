"""
BudgetRepository -- the storage contract for catalogue data and budgets.

Responsibility:
    Declares every read and write the application performs against
    storage.  ``SqlBudgetRepository`` implements it on SQLAlchemy and
    ``AuditedBudgetRepository`` decorates any implementation with an audit
    trail.  Callers depend on this ABC only.

Contract notes:
    - ``save_*`` creates when ``id`` is None, otherwise updates, and returns
      the stored entity (with its id and repository-owned timestamps).
    - ``delete_service`` and ``delete_schedule`` are soft deletes
      (``active = False``); the other deletes remove the row.
    - ``get_budgets`` returns newest first.
    - Lookups by id return None when nothing is stored under that id.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from budget_kernel.domain.types import (
    Budget,
    BudgetStatus,
    DataExport,
    PricingTier,
    Schedule,
    Service,
    ServiceCategory,
    Suburb,
    Vendor,
)
from budget_kernel.exceptions import EntityNotFoundError


@dataclass(frozen=True)
class BudgetFilters:
    """Optional filters for ``get_budgets``; search matches the address."""
    status: BudgetStatus | None = None
    search: str | None = None


class BudgetRepository(ABC):
    """Storage collaborator for vendors, services, suburbs, schedules and budgets."""

    # Vendors

    @abstractmethod
    def get_vendors(self) -> list[Vendor]: ...

    @abstractmethod
    def get_vendor(self, vendor_id: int) -> Vendor | None: ...

    @abstractmethod
    def save_vendor(self, vendor: Vendor) -> Vendor: ...

    @abstractmethod
    def delete_vendor(self, vendor_id: int) -> None: ...

    # Services

    @abstractmethod
    def get_services(self) -> list[Service]:
        """Active services only."""

    @abstractmethod
    def get_all_services(self) -> list[Service]:
        """Every service, including soft-deleted ones."""

    @abstractmethod
    def get_services_by_vendor(self, vendor_id: int) -> list[Service]: ...

    @abstractmethod
    def get_services_by_category(self, category: ServiceCategory) -> list[Service]: ...

    @abstractmethod
    def get_service(self, service_id: int) -> Service | None:
        """Lookup by id, active or not."""

    @abstractmethod
    def save_service(self, service: Service) -> Service: ...

    @abstractmethod
    def delete_service(self, service_id: int) -> None: ...

    # Suburbs

    @abstractmethod
    def get_suburbs(self) -> list[Suburb]:
        """All suburbs ordered by name."""

    @abstractmethod
    def get_suburbs_by_tier(self, tier: PricingTier) -> list[Suburb]: ...

    @abstractmethod
    def get_suburb(self, suburb_id: int) -> Suburb | None: ...

    @abstractmethod
    def save_suburb(self, suburb: Suburb) -> Suburb: ...

    @abstractmethod
    def delete_suburb(self, suburb_id: int) -> None: ...

    # Schedules

    @abstractmethod
    def get_schedules(self) -> list[Schedule]:
        """Active schedules only."""

    @abstractmethod
    def get_schedule(self, schedule_id: int) -> Schedule | None: ...

    @abstractmethod
    def save_schedule(self, schedule: Schedule) -> Schedule: ...

    @abstractmethod
    def delete_schedule(self, schedule_id: int) -> None: ...

    # Budgets

    @abstractmethod
    def get_budgets(self, filters: BudgetFilters | None = None) -> list[Budget]: ...

    @abstractmethod
    def get_budget(self, budget_id: int) -> Budget | None: ...

    @abstractmethod
    def save_budget(self, budget: Budget) -> Budget: ...

    @abstractmethod
    def delete_budget(self, budget_id: int) -> None: ...

    def require_budget(self, budget_id: int) -> Budget:
        """
        Like ``get_budget`` but raises ``EntityNotFoundError`` when absent.
        """
        budget = self.get_budget(budget_id)
        if budget is None:
            raise EntityNotFoundError("budget", budget_id)
        return budget

    # Bulk operations

    @abstractmethod
    def clear_all_data(self) -> None:
        """Remove every vendor, service, suburb, schedule and budget."""

    @abstractmethod
    def seed_data(self, data: DataExport) -> None:
        """Upsert reference data (vendors, services, suburbs, schedules)."""

    @abstractmethod
    def export_all(self) -> DataExport: ...

    @abstractmethod
    def import_all(self, data: DataExport) -> None:
        """Replace all stored data with ``data``, budgets included."""
