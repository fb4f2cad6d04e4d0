"""
Snapshot projection and JSON codec for domain entities.

Responsibility:
    ``snapshot()`` projects a domain dataclass into a flat ``dict`` of plain
    values (enums become their values, tuples become lists, datetimes become
    ISO strings).  This projection is what the diff engine compares and what
    the audit trail serialises, so diffing never needs to introspect
    arbitrary objects.  The ``*_from_dict`` functions are the inverse, used
    for JSON columns, imports and audit payload inspection.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.

Failure modes:
    - ``KeyError`` when a required key is missing from an input dict.
    - ``ValueError`` for unknown enum values or negative variant prices.
"""

from __future__ import annotations

import dataclasses
import json
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from budget_kernel.domain.audit import AuditEntityType
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
    Schedule,
    ScheduleLineItem,
    Service,
    ServiceCategory,
    Suburb,
    Variant,
    VariantSelector,
    Vendor,
)

# Collection-valued fields that get a specialised diff instead of the
# generic one.
DIFF_EXCLUSIONS: dict[AuditEntityType, frozenset[str]] = {
    AuditEntityType.BUDGET: frozenset({"line_items"}),
}


def _project(value: Any, json_safe: bool) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: _project(getattr(value, f.name), json_safe)
            for f in dataclasses.fields(value)
        }
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_project(v, json_safe) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    if json_safe and isinstance(value, Decimal):
        return str(value)
    return value


def snapshot(entity: Any, *, json_safe: bool = False) -> dict[str, Any]:
    """
    Project a domain entity into a plain dict.

    Keys follow the dataclass field order.  With ``json_safe=True``
    Decimals are rendered as strings so the result can be stored in a JSON
    column.
    """
    return _project(entity, json_safe)


class _SnapshotEncoder(json.JSONEncoder):
    def default(self, obj: Any) -> Any:
        if isinstance(obj, Decimal):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        return super().default(obj)


def to_json(entity: Any) -> str:
    """Serialise an entity snapshot for an audit payload."""
    return json.dumps(snapshot(entity), cls=_SnapshotEncoder, sort_keys=False)


# ---------------------------------------------------------------------------
# Rehydration
# ---------------------------------------------------------------------------


def _decimal(value: Any) -> Decimal | None:
    if value is None:
        return None
    return Decimal(str(value))


def _enum(cls: type[Enum], value: Any) -> Any:
    if value is None:
        return None
    return cls(value)


def _datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value)


def vendor_from_dict(data: dict[str, Any]) -> Vendor:
    return Vendor(
        id=data.get("id"),
        name=data["name"],
        short_code=data.get("short_code"),
        contact_email=data.get("contact_email"),
        contact_phone=data.get("contact_phone"),
        active=bool(data.get("active", True)),
    )


def included_service_from_dict(data: dict[str, Any]) -> IncludedService:
    return IncludedService(
        service_id=data["service_id"],
        service_name=data["service_name"],
        variant_id=data.get("variant_id"),
        variant_name=data.get("variant_name"),
    )


def variant_from_dict(data: dict[str, Any]) -> Variant:
    return Variant(
        id=data["id"],
        name=data["name"],
        base_price=_decimal(data.get("base_price", 0)),
        size_match=_enum(PropertySize, data.get("size_match")),
        tier_match=_enum(PricingTier, data.get("tier_match")),
        included_services=tuple(
            included_service_from_dict(i) for i in data.get("included_services") or ()
        ),
    )


def service_from_dict(data: dict[str, Any]) -> Service:
    return Service(
        id=data.get("id"),
        name=data["name"],
        category=ServiceCategory(data["category"]),
        vendor_id=data.get("vendor_id"),
        variant_selector=_enum(VariantSelector, data.get("variant_selector")),
        variants=tuple(variant_from_dict(v) for v in data.get("variants") or ()),
        includes_tax=bool(data.get("includes_tax", True)),
        active=bool(data.get("active", True)),
    )


def suburb_from_dict(data: dict[str, Any]) -> Suburb:
    return Suburb(
        id=data.get("id"),
        name=data["name"],
        pricing_tier=PricingTier(data["pricing_tier"]),
        postcode=data.get("postcode"),
        state=data.get("state"),
    )


def schedule_line_item_from_dict(data: dict[str, Any]) -> ScheduleLineItem:
    return ScheduleLineItem(
        service_id=data["service_id"],
        variant_id=data.get("variant_id"),
        is_selected=bool(data.get("is_selected", True)),
    )


def schedule_from_dict(data: dict[str, Any]) -> Schedule:
    return Schedule(
        id=data.get("id"),
        name=data["name"],
        property_type=PropertyType(data["property_type"]),
        property_size=PropertySize(data["property_size"]),
        tier=BudgetTier(data["tier"]),
        default_vendor_id=data.get("default_vendor_id"),
        line_items=tuple(
            schedule_line_item_from_dict(li) for li in data.get("line_items") or ()
        ),
        created_at=_datetime(data.get("created_at")),
        updated_at=_datetime(data.get("updated_at")),
        active=bool(data.get("active", True)),
    )


def line_item_from_dict(data: dict[str, Any]) -> LineItem:
    return LineItem(
        service_id=data["service_id"],
        service_name=data.get("service_name"),
        variant_id=data.get("variant_id"),
        variant_name=data.get("variant_name"),
        is_selected=bool(data.get("is_selected", True)),
        schedule_price=_decimal(data.get("schedule_price")),
        override_price=_decimal(data.get("override_price")),
        is_overridden=bool(data.get("is_overridden", False)),
    )


def budget_from_dict(data: dict[str, Any]) -> Budget:
    return Budget(
        id=data.get("id"),
        property_address=data["property_address"],
        property_type=PropertyType(data.get("property_type", "house")),
        property_size=PropertySize(data.get("property_size", "medium")),
        tier=BudgetTier(data.get("tier", "standard")),
        suburb_id=data.get("suburb_id"),
        vendor_id=data.get("vendor_id"),
        schedule_id=data.get("schedule_id"),
        schedule_name=data.get("schedule_name"),
        line_items=tuple(line_item_from_dict(li) for li in data.get("line_items") or ()),
        notes=data.get("notes"),
        client_name=data.get("client_name"),
        agent_name=data.get("agent_name"),
        status=BudgetStatus(data.get("status", "draft")),
        created_at=_datetime(data.get("created_at")),
        updated_at=_datetime(data.get("updated_at")),
    )


def data_export_from_dict(data: dict[str, Any]) -> DataExport:
    """Rebuild an export envelope, e.g. from a JSON backup file."""
    return DataExport(
        export_version=data.get("export_version", "1.0"),
        export_date=_datetime(data.get("export_date")),
        app_version=data.get("app_version", "0.1.0"),
        vendors=tuple(vendor_from_dict(v) for v in data.get("vendors") or ()),
        services=tuple(service_from_dict(s) for s in data.get("services") or ()),
        suburbs=tuple(suburb_from_dict(s) for s in data.get("suburbs") or ()),
        schedules=tuple(schedule_from_dict(s) for s in data.get("schedules") or ()),
        budgets=tuple(budget_from_dict(b) for b in data.get("budgets") or ()),
    )
