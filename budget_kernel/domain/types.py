"""
Marketing Budget Domain Types (``budget_kernel.domain.types``).

Responsibility
--------------
Frozen dataclass value objects for the nouns of the marketing budget:
vendors, services and their priced variants, suburbs, schedules (budget
templates), budgets and their line items, plus the transient variant
resolution context and the bulk export envelope.

Architecture position
---------------------
**Kernel > Domain** -- pure data definitions with ZERO I/O.  Storage-agnostic:
the SQL repository maps them to ORM rows, engines compute over them.

Invariants enforced
-------------------
* All models are ``frozen=True``; collections are tuples, so a budget owns
  its line items exclusively.
* All monetary fields use ``Decimal`` -- NEVER ``float``.
* ``Variant.base_price`` is non-negative.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class ServiceCategory(str, Enum):
    """Service categories available in the system."""
    PHOTOGRAPHY = "photography"
    FLOOR_PLANS = "floorPlans"
    AERIAL = "aerial"
    VIDEO = "video"
    VIRTUAL_STAGING = "virtualStaging"
    INTERNET = "internet"
    LEGAL = "legal"
    PRINT = "print"
    SIGNAGE = "signage"
    OTHER = "other"


class VariantSelector(str, Enum):
    """How the correct variant is determined for a service."""
    MANUAL = "manual"
    PROPERTY_SIZE = "propertySize"
    SUBURB_TIER = "suburbTier"


class PropertyType(str, Enum):
    HOUSE = "house"
    UNIT = "unit"
    TOWNHOUSE = "townhouse"
    LAND = "land"
    RURAL = "rural"
    COMMERCIAL = "commercial"


class PropertySize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class PricingTier(str, Enum):
    """Suburb pricing tier (maps to internet listing tiers)."""
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class BudgetTier(str, Enum):
    """Schedule / budget tier level."""
    BASIC = "basic"
    STANDARD = "standard"
    PREMIUM = "premium"


class BudgetStatus(str, Enum):
    """Budget lifecycle states."""
    DRAFT = "draft"
    APPROVED = "approved"
    SENT = "sent"
    ARCHIVED = "archived"


# ---------------------------------------------------------------------------
# Vendor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Vendor:
    """A marketing services vendor."""
    name: str
    id: int | None = None
    short_code: str | None = None
    contact_email: str | None = None
    contact_phone: str | None = None
    active: bool = True


# ---------------------------------------------------------------------------
# Service & variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class IncludedService:
    """A service bundled into a package variant."""
    service_id: int
    service_name: str
    variant_id: str | None = None
    variant_name: str | None = None


@dataclass(frozen=True)
class Variant:
    """A priced option of a service (e.g. "8 Photos", "Tier A Suburbs")."""
    id: str
    name: str
    base_price: Decimal
    size_match: PropertySize | None = None
    tier_match: PricingTier | None = None
    included_services: tuple[IncludedService, ...] = ()

    def __post_init__(self):
        if self.base_price < 0:
            raise ValueError(f"Variant {self.id} base_price cannot be negative")
        if self.size_match is not None and self.tier_match is not None:
            raise ValueError(f"Variant {self.id} cannot match on both size and tier")


@dataclass(frozen=True)
class Service:
    """A marketing service offered by a vendor or available system-wide."""
    name: str
    category: ServiceCategory
    id: int | None = None
    vendor_id: int | None = None
    variant_selector: VariantSelector | None = None
    variants: tuple[Variant, ...] = ()
    includes_tax: bool = True
    active: bool = True


# ---------------------------------------------------------------------------
# Suburb
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Suburb:
    """A suburb with a pricing tier for internet listing packages."""
    name: str
    pricing_tier: PricingTier
    id: int | None = None
    postcode: str | None = None
    state: str | None = None


# ---------------------------------------------------------------------------
# Schedule (budget template)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ScheduleLineItem:
    """A schedule entry referencing a service and optional variant."""
    service_id: int
    variant_id: str | None = None
    is_selected: bool = True


@dataclass(frozen=True)
class Schedule:
    """Default line items for a property type / size / tier combination."""
    name: str
    property_type: PropertyType
    property_size: PropertySize
    tier: BudgetTier
    id: int | None = None
    default_vendor_id: int | None = None
    line_items: tuple[ScheduleLineItem, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None
    active: bool = True


# ---------------------------------------------------------------------------
# Budget
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LineItem:
    """A budget line item: selection, variant and price override."""
    service_id: int
    service_name: str | None = None
    variant_id: str | None = None
    variant_name: str | None = None
    is_selected: bool = True
    schedule_price: Decimal | None = None
    override_price: Decimal | None = None
    is_overridden: bool = False


@dataclass(frozen=True)
class Budget:
    """A property marketing budget."""
    property_address: str
    property_type: PropertyType = PropertyType.HOUSE
    property_size: PropertySize = PropertySize.MEDIUM
    tier: BudgetTier = BudgetTier.STANDARD
    id: int | None = None
    suburb_id: int | None = None
    vendor_id: int | None = None
    schedule_id: int | None = None
    schedule_name: str | None = None
    line_items: tuple[LineItem, ...] = ()
    notes: str | None = None
    client_name: str | None = None
    agent_name: str | None = None
    status: BudgetStatus = BudgetStatus.DRAFT
    created_at: datetime | None = None
    updated_at: datetime | None = None


def new_budget(
    property_address: str = "",
    vendor_id: int | None = None,
) -> Budget:
    """Default values for a freshly created draft budget."""
    return Budget(
        property_address=property_address,
        property_type=PropertyType.HOUSE,
        property_size=PropertySize.MEDIUM,
        tier=BudgetTier.STANDARD,
        vendor_id=vendor_id,
        status=BudgetStatus.DRAFT,
    )


# ---------------------------------------------------------------------------
# Variant resolution context
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResolutionContext:
    """Context for picking a variant; derived from a budget, never stored."""
    property_size: PropertySize | None = None
    suburb_tier: PricingTier | None = None


# ---------------------------------------------------------------------------
# Export envelope
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DataExport:
    """Full data export / backup, also used for seeding and import."""
    export_version: str = "1.0"
    export_date: datetime | None = None
    app_version: str = "0.1.0"
    vendors: tuple[Vendor, ...] = field(default_factory=tuple)
    services: tuple[Service, ...] = field(default_factory=tuple)
    suburbs: tuple[Suburb, ...] = field(default_factory=tuple)
    schedules: tuple[Schedule, ...] = field(default_factory=tuple)
    budgets: tuple[Budget, ...] = field(default_factory=tuple)
