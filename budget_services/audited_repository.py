"""
AuditedBudgetRepository -- audit trail decorator over any BudgetRepository.

Responsibility:
    Implements the full ``BudgetRepository`` contract by composition.
    Reads pass straight through to the wrapped repository.  Every write:

        1. reads the "before" entity from the wrapped repository,
        2. delegates the write and keeps the returned entity as "after",
        3. classifies it as create / update / statusChange / delete,
        4. diffs the two snapshots (budgets add a keyed line-item diff),
        5. appends one AuditEntry with a one-line summary and JSON
           before/after payloads.

    ``seed_data`` and ``import_all`` log one coarse entry each;
    ``clear_all_data`` also clears the audit store.

Architecture position:
    Services -- orchestration above the kernel and the engines.

Failure modes:
    - A failing delegated write propagates unchanged and nothing is logged.
    - A failing audit store is handled by ``AuditFailurePolicy``:
      PROPAGATE raises ``AuditLogError`` (the data write is already
      committed), SUPPRESS logs ``audit_log_failed`` and returns normally.

Known limitation:
    The before-read and the delegated write are separate operations.  Two
    writers racing on one entity can both read the same "before", so the
    pair of audit entries may be misleading even though storage is right.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

from budget_engines.diff import diff_changes, diff_line_items, summarise_changes
from budget_kernel.domain.audit import (
    AuditAction,
    AuditEntityType,
    AuditEntry,
    AuditFailurePolicy,
    FieldChange,
)
from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.snapshots import DIFF_EXCLUSIONS, snapshot, to_json
from budget_kernel.domain.types import (
    Budget,
    DataExport,
    PricingTier,
    Schedule,
    Service,
    ServiceCategory,
    Suburb,
    Vendor,
)
from budget_kernel.exceptions import AuditLogError
from budget_kernel.logging_config import LogContext, get_logger
from budget_kernel.services.audit_logger import AuditLogger
from budget_kernel.services.repository import BudgetFilters, BudgetRepository

logger = get_logger("services.audited_repository")

T = TypeVar("T")

SEED_LABEL = "Seed data"
IMPORT_LABEL = "Full import"


def entity_label(entity: Any) -> str:
    """Human label: the property address for budgets, the name otherwise."""
    if isinstance(entity, Budget):
        return entity.property_address
    return entity.name


class AuditedBudgetRepository(BudgetRepository):
    """
    Decorator adding an audit trail to a ``BudgetRepository``.

    Args:
        inner: The repository that does the persistence.
        audit_logger: Append-only audit store.
        user: Name recorded on every entry.
        clock: Source of entry timestamps.
        failure_policy: What to do when the audit store fails.
        summary_max_fields: Field changes rendered before "+N more".
    """

    def __init__(
        self,
        inner: BudgetRepository,
        audit_logger: AuditLogger,
        user: str,
        clock: Clock | None = None,
        failure_policy: AuditFailurePolicy = AuditFailurePolicy.PROPAGATE,
        summary_max_fields: int = 4,
    ):
        self._inner = inner
        self._audit = audit_logger
        self._user = user
        self._clock = clock or SystemClock()
        self._failure_policy = AuditFailurePolicy(failure_policy)
        self._summary_max_fields = summary_max_fields

    @property
    def inner(self) -> BudgetRepository:
        return self._inner

    # =========================================================================
    # Shared diff-then-log helpers
    # =========================================================================

    def _guard_audit(
        self,
        entity_type: AuditEntityType,
        entity_id: int | None,
        action: str,
        operation: Callable[[], Any],
    ) -> None:
        try:
            operation()
        except Exception as exc:
            logger.error(
                "audit_log_failed",
                extra={
                    "entity_type": entity_type.value,
                    "entity_id": entity_id,
                    "action": action,
                    "failure_policy": self._failure_policy.value,
                },
                exc_info=True,
            )
            if self._failure_policy == AuditFailurePolicy.PROPAGATE:
                raise AuditLogError(entity_type.value, entity_id, action) from exc

    def _record(
        self,
        entity_type: AuditEntityType,
        entity_id: int | None,
        label: str,
        action: AuditAction,
        summary: str,
        before: Any = None,
        after: Any = None,
    ) -> None:
        entry = AuditEntry(
            timestamp=self._clock.now(),
            user=self._user,
            entity_type=entity_type,
            entity_id=entity_id,
            entity_label=label,
            action=action,
            summary=summary,
            before=to_json(before) if before is not None else None,
            after=to_json(after) if after is not None else None,
        )
        self._guard_audit(
            entity_type, entity_id, action.value, lambda: self._audit.log(entry)
        )

    def _changes(
        self, entity_type: AuditEntityType, before: Any, after: Any,
    ) -> list[FieldChange]:
        changes = diff_changes(
            snapshot(before),
            snapshot(after),
            DIFF_EXCLUSIONS.get(entity_type, frozenset()),
        )
        if entity_type == AuditEntityType.BUDGET:
            changes.extend(diff_line_items(before.line_items, after.line_items))
        return changes

    def _audited_save(
        self,
        entity_type: AuditEntityType,
        entity: T,
        fetch: Callable[[int], T | None],
        write: Callable[[T], T],
    ) -> T:
        before = fetch(entity.id) if entity.id is not None else None
        saved = write(entity)
        label = entity_label(saved)
        noun = entity_type.value

        if before is None:
            action = AuditAction.CREATE
            summary = f'Created {noun} "{label}"'
        else:
            changes = self._changes(entity_type, before, saved)
            if entity_type == AuditEntityType.BUDGET and before.status != saved.status:
                action = AuditAction.STATUS_CHANGE
                changes = [c for c in changes if c.field != "status"]
                base = (
                    f'Budget "{label}" status '
                    f"{before.status.value} → {saved.status.value}"
                )
            else:
                action = AuditAction.UPDATE
                base = f'Updated {noun} "{label}"'
            summary = summarise_changes(base, changes, self._summary_max_fields)

        with LogContext.bind(
            user=self._user, entity_type=noun, entity_id=str(saved.id),
        ):
            self._record(entity_type, saved.id, label, action, summary, before, saved)
        return saved

    def _audited_delete(
        self,
        entity_type: AuditEntityType,
        entity_id: int,
        fetch: Callable[[int], Any],
        delete: Callable[[int], None],
    ) -> None:
        before = fetch(entity_id)
        delete(entity_id)
        label = entity_label(before) if before is not None else f"#{entity_id}"
        summary = f'Deleted {entity_type.value} "{label}"'
        with LogContext.bind(
            user=self._user, entity_type=entity_type.value, entity_id=str(entity_id),
        ):
            self._record(
                entity_type, entity_id, label, AuditAction.DELETE, summary, before, None,
            )

    # =========================================================================
    # Vendors
    # =========================================================================

    def get_vendors(self) -> list[Vendor]:
        return self._inner.get_vendors()

    def get_vendor(self, vendor_id: int) -> Vendor | None:
        return self._inner.get_vendor(vendor_id)

    def save_vendor(self, vendor: Vendor) -> Vendor:
        return self._audited_save(
            AuditEntityType.VENDOR, vendor, self._inner.get_vendor, self._inner.save_vendor,
        )

    def delete_vendor(self, vendor_id: int) -> None:
        self._audited_delete(
            AuditEntityType.VENDOR, vendor_id, self._inner.get_vendor, self._inner.delete_vendor,
        )

    # =========================================================================
    # Services
    # =========================================================================

    def get_services(self) -> list[Service]:
        return self._inner.get_services()

    def get_all_services(self) -> list[Service]:
        return self._inner.get_all_services()

    def get_services_by_vendor(self, vendor_id: int) -> list[Service]:
        return self._inner.get_services_by_vendor(vendor_id)

    def get_services_by_category(self, category: ServiceCategory) -> list[Service]:
        return self._inner.get_services_by_category(category)

    def get_service(self, service_id: int) -> Service | None:
        return self._inner.get_service(service_id)

    def save_service(self, service: Service) -> Service:
        return self._audited_save(
            AuditEntityType.SERVICE, service, self._inner.get_service, self._inner.save_service,
        )

    def delete_service(self, service_id: int) -> None:
        self._audited_delete(
            AuditEntityType.SERVICE, service_id, self._inner.get_service, self._inner.delete_service,
        )

    # =========================================================================
    # Suburbs
    # =========================================================================

    def get_suburbs(self) -> list[Suburb]:
        return self._inner.get_suburbs()

    def get_suburbs_by_tier(self, tier: PricingTier) -> list[Suburb]:
        return self._inner.get_suburbs_by_tier(tier)

    def get_suburb(self, suburb_id: int) -> Suburb | None:
        return self._inner.get_suburb(suburb_id)

    def save_suburb(self, suburb: Suburb) -> Suburb:
        return self._audited_save(
            AuditEntityType.SUBURB, suburb, self._inner.get_suburb, self._inner.save_suburb,
        )

    def delete_suburb(self, suburb_id: int) -> None:
        self._audited_delete(
            AuditEntityType.SUBURB, suburb_id, self._inner.get_suburb, self._inner.delete_suburb,
        )

    # =========================================================================
    # Schedules
    # =========================================================================

    def get_schedules(self) -> list[Schedule]:
        return self._inner.get_schedules()

    def get_schedule(self, schedule_id: int) -> Schedule | None:
        return self._inner.get_schedule(schedule_id)

    def save_schedule(self, schedule: Schedule) -> Schedule:
        return self._audited_save(
            AuditEntityType.SCHEDULE, schedule, self._inner.get_schedule, self._inner.save_schedule,
        )

    def delete_schedule(self, schedule_id: int) -> None:
        self._audited_delete(
            AuditEntityType.SCHEDULE, schedule_id,
            self._inner.get_schedule, self._inner.delete_schedule,
        )

    # =========================================================================
    # Budgets
    # =========================================================================

    def get_budgets(self, filters: BudgetFilters | None = None) -> list[Budget]:
        return self._inner.get_budgets(filters)

    def get_budget(self, budget_id: int) -> Budget | None:
        return self._inner.get_budget(budget_id)

    def save_budget(self, budget: Budget) -> Budget:
        return self._audited_save(
            AuditEntityType.BUDGET, budget, self._inner.get_budget, self._inner.save_budget,
        )

    def delete_budget(self, budget_id: int) -> None:
        self._audited_delete(
            AuditEntityType.BUDGET, budget_id, self._inner.get_budget, self._inner.delete_budget,
        )

    # =========================================================================
    # Bulk operations
    # =========================================================================

    def clear_all_data(self) -> None:
        self._inner.clear_all_data()
        self._guard_audit(AuditEntityType.BUDGET, None, "clear", self._audit.clear)

    def seed_data(self, data: DataExport) -> None:
        self._inner.seed_data(data)
        self._record(
            AuditEntityType.BUDGET, None, SEED_LABEL, AuditAction.SEED,
            "Reference data seeded",
        )

    def export_all(self) -> DataExport:
        return self._inner.export_all()

    def import_all(self, data: DataExport) -> None:
        self._inner.import_all(data)
        self._record(
            AuditEntityType.BUDGET, None, IMPORT_LABEL, AuditAction.IMPORT,
            f"Imported {len(data.budgets)} budgets, {len(data.vendors)} vendors, "
            f"{len(data.services)} services",
        )
