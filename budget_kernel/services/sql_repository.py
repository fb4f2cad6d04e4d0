"""
SqlBudgetRepository -- SQLAlchemy implementation of BudgetRepository.

Responsibility:
    Maps the frozen domain dataclasses to ORM rows and back.  Every public
    write owns its transaction: it commits on success, and on any exception
    rolls the session back and re-raises the original error.

Architecture position:
    Kernel > Services.  Imports models/ and domain/.  Returns domain
    dataclasses, never ORM rows.

Invariants enforced:
    - Budget and schedule ``created_at``/``updated_at`` come from the
      injected clock.  An update keeps the stored ``created_at``.
    - Services and schedules are soft-deleted.
    - A service saved without variants gets a single zero-priced
      ``default`` variant so it can always be priced.

Failure modes:
    - SQLAlchemy errors propagate after rollback.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from budget_kernel.domain.clock import Clock, SystemClock
from budget_kernel.domain.types import (
    Budget,
    DataExport,
    PricingTier,
    Schedule,
    Service,
    ServiceCategory,
    Suburb,
    Variant,
    Vendor,
)
from budget_kernel.logging_config import get_logger
from budget_kernel.models.budget import BudgetModel
from budget_kernel.models.catalog import (
    ScheduleModel,
    ServiceModel,
    SuburbModel,
    VendorModel,
)
from budget_kernel.services.repository import BudgetFilters, BudgetRepository

logger = get_logger("services.sql_repository")

DEFAULT_VARIANT = Variant(id="default", name="Standard", base_price=Decimal("0"))


class SqlBudgetRepository(BudgetRepository):
    """
    Budget storage on a SQLAlchemy session.

    Contract:
        Accepts an open ``Session``; each write method commits.
        Read methods never write.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        try:
            yield
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    def _upsert(self, model_cls, dto):
        """Update the row with ``dto.id`` in place, or add a new one."""
        model = self._session.get(model_cls, dto.id) if dto.id is not None else None
        if model is None:
            model = model_cls.from_dto(dto)
            self._session.add(model)
        else:
            model.apply_dto(dto)
        return model

    # =========================================================================
    # Vendors
    # =========================================================================

    def get_vendors(self) -> list[Vendor]:
        rows = self._session.scalars(select(VendorModel).order_by(VendorModel.id))
        return [r.to_dto() for r in rows]

    def get_vendor(self, vendor_id: int) -> Vendor | None:
        row = self._session.get(VendorModel, vendor_id)
        return row.to_dto() if row else None

    def save_vendor(self, vendor: Vendor) -> Vendor:
        with self._transaction():
            model = self._upsert(VendorModel, vendor)
            self._session.flush()
        logger.info("vendor_saved", extra={"vendor_id": model.id})
        return model.to_dto()

    def delete_vendor(self, vendor_id: int) -> None:
        with self._transaction():
            self._session.execute(delete(VendorModel).where(VendorModel.id == vendor_id))
        logger.info("vendor_deleted", extra={"vendor_id": vendor_id})

    # =========================================================================
    # Services
    # =========================================================================

    def get_services(self) -> list[Service]:
        rows = self._session.scalars(
            select(ServiceModel)
            .where(ServiceModel.active.is_(True))
            .order_by(ServiceModel.id)
        )
        return [r.to_dto() for r in rows]

    def get_all_services(self) -> list[Service]:
        rows = self._session.scalars(select(ServiceModel).order_by(ServiceModel.id))
        return [r.to_dto() for r in rows]

    def get_services_by_vendor(self, vendor_id: int) -> list[Service]:
        rows = self._session.scalars(
            select(ServiceModel)
            .where(ServiceModel.vendor_id == vendor_id, ServiceModel.active.is_(True))
            .order_by(ServiceModel.id)
        )
        return [r.to_dto() for r in rows]

    def get_services_by_category(self, category: ServiceCategory) -> list[Service]:
        rows = self._session.scalars(
            select(ServiceModel)
            .where(
                ServiceModel.category == ServiceCategory(category).value,
                ServiceModel.active.is_(True),
            )
            .order_by(ServiceModel.id)
        )
        return [r.to_dto() for r in rows]

    def get_service(self, service_id: int) -> Service | None:
        row = self._session.get(ServiceModel, service_id)
        return row.to_dto() if row else None

    def save_service(self, service: Service) -> Service:
        if not service.variants:
            service = dataclasses.replace(service, variants=(DEFAULT_VARIANT,))
        with self._transaction():
            model = self._upsert(ServiceModel, service)
            self._session.flush()
        logger.info(
            "service_saved",
            extra={"service_id": model.id, "variant_count": len(service.variants)},
        )
        return model.to_dto()

    def delete_service(self, service_id: int) -> None:
        with self._transaction():
            model = self._session.get(ServiceModel, service_id)
            if model is not None:
                model.active = False
        logger.info("service_deactivated", extra={"service_id": service_id})

    # =========================================================================
    # Suburbs
    # =========================================================================

    def get_suburbs(self) -> list[Suburb]:
        rows = self._session.scalars(
            select(SuburbModel).order_by(SuburbModel.name, SuburbModel.id)
        )
        return [r.to_dto() for r in rows]

    def get_suburbs_by_tier(self, tier: PricingTier) -> list[Suburb]:
        rows = self._session.scalars(
            select(SuburbModel)
            .where(SuburbModel.pricing_tier == PricingTier(tier).value)
            .order_by(SuburbModel.name, SuburbModel.id)
        )
        return [r.to_dto() for r in rows]

    def get_suburb(self, suburb_id: int) -> Suburb | None:
        row = self._session.get(SuburbModel, suburb_id)
        return row.to_dto() if row else None

    def save_suburb(self, suburb: Suburb) -> Suburb:
        with self._transaction():
            model = self._upsert(SuburbModel, suburb)
            self._session.flush()
        logger.info("suburb_saved", extra={"suburb_id": model.id})
        return model.to_dto()

    def delete_suburb(self, suburb_id: int) -> None:
        with self._transaction():
            self._session.execute(delete(SuburbModel).where(SuburbModel.id == suburb_id))
        logger.info("suburb_deleted", extra={"suburb_id": suburb_id})

    # =========================================================================
    # Schedules
    # =========================================================================

    def get_schedules(self) -> list[Schedule]:
        rows = self._session.scalars(
            select(ScheduleModel)
            .where(ScheduleModel.active.is_(True))
            .order_by(ScheduleModel.id)
        )
        return [r.to_dto() for r in rows]

    def get_schedule(self, schedule_id: int) -> Schedule | None:
        row = self._session.get(ScheduleModel, schedule_id)
        return row.to_dto() if row else None

    def _put_schedule(self, schedule: Schedule) -> ScheduleModel:
        now = self._clock.now()
        model = self._upsert(ScheduleModel, schedule)
        model.created_at = model.created_at or schedule.created_at or now
        model.updated_at = now
        return model

    def save_schedule(self, schedule: Schedule) -> Schedule:
        with self._transaction():
            model = self._put_schedule(schedule)
            self._session.flush()
        logger.info("schedule_saved", extra={"schedule_id": model.id})
        return model.to_dto()

    def delete_schedule(self, schedule_id: int) -> None:
        with self._transaction():
            model = self._session.get(ScheduleModel, schedule_id)
            if model is not None:
                model.active = False
                model.updated_at = self._clock.now()
        logger.info("schedule_deactivated", extra={"schedule_id": schedule_id})

    # =========================================================================
    # Budgets
    # =========================================================================

    def get_budgets(self, filters: BudgetFilters | None = None) -> list[Budget]:
        stmt = select(BudgetModel).order_by(
            BudgetModel.created_at.desc(), BudgetModel.id.desc()
        )
        if filters is not None:
            if filters.status is not None:
                stmt = stmt.where(BudgetModel.status == filters.status.value)
            if filters.search:
                stmt = stmt.where(
                    func.lower(BudgetModel.property_address).contains(
                        filters.search.lower(), autoescape=True
                    )
                )
        return [r.to_dto() for r in self._session.scalars(stmt)]

    def get_budget(self, budget_id: int) -> Budget | None:
        row = self._session.get(BudgetModel, budget_id)
        return row.to_dto() if row else None

    def save_budget(self, budget: Budget) -> Budget:
        now = self._clock.now()
        with self._transaction():
            model = self._upsert(BudgetModel, budget)
            model.created_at = model.created_at or now
            model.updated_at = now
            self._session.flush()
        logger.info(
            "budget_saved",
            extra={
                "budget_id": model.id,
                "status": model.status,
                "line_item_count": len(budget.line_items),
            },
        )
        return model.to_dto()

    def delete_budget(self, budget_id: int) -> None:
        with self._transaction():
            self._session.execute(delete(BudgetModel).where(BudgetModel.id == budget_id))
        logger.info("budget_deleted", extra={"budget_id": budget_id})

    # =========================================================================
    # Bulk operations
    # =========================================================================

    def _clear(self) -> None:
        for model_cls in (BudgetModel, ScheduleModel, SuburbModel, ServiceModel, VendorModel):
            self._session.execute(delete(model_cls))

    def _seed(self, data: DataExport) -> None:
        for vendor in data.vendors:
            self._upsert(VendorModel, vendor)
        for service in data.services:
            self._upsert(ServiceModel, service)
        for suburb in data.suburbs:
            self._upsert(SuburbModel, suburb)
        for schedule in data.schedules:
            self._put_schedule(schedule)

    def clear_all_data(self) -> None:
        with self._transaction():
            self._clear()
        logger.info("all_data_cleared")

    def seed_data(self, data: DataExport) -> None:
        with self._transaction():
            self._seed(data)
        logger.info(
            "reference_data_seeded",
            extra={
                "vendor_count": len(data.vendors),
                "service_count": len(data.services),
                "suburb_count": len(data.suburbs),
                "schedule_count": len(data.schedules),
            },
        )

    def export_all(self) -> DataExport:
        def _all(model_cls):
            rows = self._session.scalars(select(model_cls).order_by(model_cls.id))
            return tuple(r.to_dto() for r in rows)

        return DataExport(
            export_date=self._clock.now(),
            vendors=_all(VendorModel),
            services=_all(ServiceModel),
            suburbs=_all(SuburbModel),
            schedules=_all(ScheduleModel),
            budgets=_all(BudgetModel),
        )

    def import_all(self, data: DataExport) -> None:
        now = self._clock.now()
        with self._transaction():
            self._clear()
            self._session.flush()
            self._seed(data)
            for budget in data.budgets:
                model = BudgetModel.from_dto(budget)
                model.created_at = budget.created_at or now
                model.updated_at = budget.updated_at or now
                self._session.add(model)
        logger.info(
            "data_imported",
            extra={
                "budget_count": len(data.budgets),
                "vendor_count": len(data.vendors),
                "service_count": len(data.services),
            },
        )
