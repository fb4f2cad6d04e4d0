"""
Module: budget_kernel.models.catalog
Responsibility: ORM persistence for the reference catalogue: vendors,
    services (with their priced variants), suburbs and schedules.
Architecture position: Kernel > Models.  Imports db/base.py and the
    domain snapshot codec for JSON columns.

Storage notes:
    - Service variants and schedule line items are stored as JSON arrays.
      They are always read and written with their parent, never queried on
      their own.
    - Monetary values inside JSON are stored as strings so Decimal precision
      survives the round trip.
    - Services and schedules are soft-deleted (``active = False``).
"""

from __future__ import annotations

from sqlalchemy import JSON, Boolean, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import Base, TrackedBase
from budget_kernel.domain.snapshots import (
    schedule_line_item_from_dict,
    snapshot,
    variant_from_dict,
)
from budget_kernel.domain.types import (
    BudgetTier,
    PricingTier,
    PropertySize,
    PropertyType,
    Schedule,
    Service,
    ServiceCategory,
    Suburb,
    VariantSelector,
    Vendor,
)


class VendorModel(Base):
    """A marketing services vendor."""

    __tablename__ = "vendors"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    short_code: Mapped[str | None] = mapped_column(String(20), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Vendor {self.id}: {self.name}>"

    def to_dto(self) -> Vendor:
        return Vendor(
            id=self.id,
            name=self.name,
            short_code=self.short_code,
            contact_email=self.contact_email,
            contact_phone=self.contact_phone,
            active=self.active,
        )

    def apply_dto(self, dto: Vendor) -> None:
        self.name = dto.name
        self.short_code = dto.short_code
        self.contact_email = dto.contact_email
        self.contact_phone = dto.contact_phone
        self.active = dto.active

    @classmethod
    def from_dto(cls, dto: Vendor) -> VendorModel:
        model = cls(id=dto.id)
        model.apply_dto(dto)
        return model


class ServiceModel(Base):
    """A service offered by a vendor, or system-wide when vendor_id is NULL."""

    __tablename__ = "services"

    __table_args__ = (
        Index("idx_service_vendor", "vendor_id"),
        Index("idx_service_category", "category"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category: Mapped[str] = mapped_column(String(50), nullable=False)
    vendor_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    variant_selector: Mapped[str | None] = mapped_column(String(50), nullable=True)
    variants: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    includes_tax: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Service {self.id}: {self.name} ({self.category})>"

    def to_dto(self) -> Service:
        return Service(
            id=self.id,
            name=self.name,
            category=ServiceCategory(self.category),
            vendor_id=self.vendor_id,
            variant_selector=(
                VariantSelector(self.variant_selector)
                if self.variant_selector else None
            ),
            variants=tuple(variant_from_dict(v) for v in self.variants or ()),
            includes_tax=self.includes_tax,
            active=self.active,
        )

    def apply_dto(self, dto: Service) -> None:
        self.name = dto.name
        self.category = dto.category.value
        self.vendor_id = dto.vendor_id
        self.variant_selector = (
            dto.variant_selector.value if dto.variant_selector else None
        )
        self.variants = [snapshot(v, json_safe=True) for v in dto.variants]
        self.includes_tax = dto.includes_tax
        self.active = dto.active

    @classmethod
    def from_dto(cls, dto: Service) -> ServiceModel:
        model = cls(id=dto.id)
        model.apply_dto(dto)
        return model


class SuburbModel(Base):
    """A suburb and its internet-listing pricing tier."""

    __tablename__ = "suburbs"

    __table_args__ = (
        Index("idx_suburb_tier", "pricing_tier"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    pricing_tier: Mapped[str] = mapped_column(String(1), nullable=False)
    postcode: Mapped[str | None] = mapped_column(String(10), nullable=True)
    state: Mapped[str | None] = mapped_column(String(10), nullable=True)

    def __repr__(self) -> str:
        return f"<Suburb {self.id}: {self.name} tier={self.pricing_tier}>"

    def to_dto(self) -> Suburb:
        return Suburb(
            id=self.id,
            name=self.name,
            pricing_tier=PricingTier(self.pricing_tier),
            postcode=self.postcode,
            state=self.state,
        )

    def apply_dto(self, dto: Suburb) -> None:
        self.name = dto.name
        self.pricing_tier = dto.pricing_tier.value
        self.postcode = dto.postcode
        self.state = dto.state

    @classmethod
    def from_dto(cls, dto: Suburb) -> SuburbModel:
        model = cls(id=dto.id)
        model.apply_dto(dto)
        return model


class ScheduleModel(TrackedBase):
    """A budget template for a property type / size / tier combination."""

    __tablename__ = "schedules"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    property_type: Mapped[str] = mapped_column(String(20), nullable=False)
    property_size: Mapped[str] = mapped_column(String(20), nullable=False)
    tier: Mapped[str] = mapped_column(String(20), nullable=False)
    default_vendor_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    line_items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    def __repr__(self) -> str:
        return f"<Schedule {self.id}: {self.name}>"

    def to_dto(self) -> Schedule:
        return Schedule(
            id=self.id,
            name=self.name,
            property_type=PropertyType(self.property_type),
            property_size=PropertySize(self.property_size),
            tier=BudgetTier(self.tier),
            default_vendor_id=self.default_vendor_id,
            line_items=tuple(
                schedule_line_item_from_dict(li) for li in self.line_items or ()
            ),
            created_at=self.created_at,
            updated_at=self.updated_at,
            active=self.active,
        )

    def apply_dto(self, dto: Schedule) -> None:
        """Copy content fields; timestamps are owned by the repository."""
        self.name = dto.name
        self.property_type = dto.property_type.value
        self.property_size = dto.property_size.value
        self.tier = dto.tier.value
        self.default_vendor_id = dto.default_vendor_id
        self.line_items = [snapshot(li, json_safe=True) for li in dto.line_items]
        self.active = dto.active

    @classmethod
    def from_dto(cls, dto: Schedule) -> ScheduleModel:
        model = cls(id=dto.id, created_at=dto.created_at, updated_at=dto.updated_at)
        model.apply_dto(dto)
        return model
