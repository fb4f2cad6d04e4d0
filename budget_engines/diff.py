"""
Diff Engine - field-level changes between two entity snapshots.

Two independent pure functions whose outputs are concatenated by the
caller:

    diff_changes     generic key-by-key diff of flat snapshot dicts
                     (collection fields are excluded and diffed separately)
    diff_line_items  keyed diff of budget line items by service_id

``summarise_changes`` renders either kind into one line of audit text:

    Updated budget "12 Smith St": notes — → Corner block, vendor 1 → 2

Values are rendered for people, not machines: None is an em dash, booleans
are lower-case, lists are counted, dicts are JSON.
"""

from __future__ import annotations

import json
import re
from decimal import Decimal
from typing import Any, Iterable, Mapping, Sequence

from budget_engines.tracer import traced_engine
from budget_kernel.domain.audit import FieldChange
from budget_kernel.domain.types import LineItem

EMPTY = "—"
ARROW = "→"

# Always change on write and carry no meaning for a reader.
IGNORED_FIELDS = frozenset({"created_at", "updated_at"})

_IDENTIFIER = re.compile(r"^[a-z][a-z0-9_]*$")


def display_value(value: Any) -> str:
    """Render a snapshot value for an audit summary."""
    if value is None:
        return EMPTY
    if isinstance(value, str):
        return value if value else '""'
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return f"[{len(value)} items]"
    if isinstance(value, dict):
        return json.dumps(value, default=str)
    return str(value)


def format_field_name(field: str) -> str:
    """
    ``vendor_id`` -> ``vendor``, ``property_address`` -> ``property address``.

    Labels that are not plain identifiers, such as ``service "Photos"``, are
    returned unchanged.
    """
    if not _IDENTIFIER.match(field):
        return field
    if field.endswith("_id") and len(field) > 3:
        field = field[:-3]
    return field.replace("_", " ")


def diff_changes(
    before: Mapping[str, Any],
    after: Mapping[str, Any],
    skip_fields: Iterable[str] | None = None,
) -> list[FieldChange]:
    """
    One FieldChange per key whose value differs.

    Keys are visited in ``before`` order, then keys only ``after`` has, so
    the output is deterministic.  A missing key and a None value are equal.
    """
    skip = IGNORED_FIELDS | frozenset(skip_fields or ())
    keys = list(before)
    keys.extend(k for k in after if k not in before)

    changes: list[FieldChange] = []
    for key in keys:
        if key in skip:
            continue
        old = before.get(key)
        new = after.get(key)
        if old == new:
            continue
        changes.append(FieldChange(key, display_value(old), display_value(new)))
    return changes


def summarise_changes(
    base_text: str,
    changes: Sequence[FieldChange],
    max_fields: int = 4,
) -> str:
    """Join ``base_text`` with up to ``max_fields`` rendered changes."""
    if not changes:
        return base_text
    parts = [
        f"{format_field_name(c.field)} {c.from_value} {ARROW} {c.to_value}"
        for c in changes[:max_fields]
    ]
    remaining = len(changes) - max_fields
    if remaining > 0:
        parts.append(f"+{remaining} more")
    return f"{base_text}: {', '.join(parts)}"


# ---------------------------------------------------------------------------
# Line items
# ---------------------------------------------------------------------------


def _service_field(item: LineItem, fallback: LineItem | None = None) -> str:
    name = item.service_name or (fallback.service_name if fallback else None)
    return f'service "{name or item.service_id}"'


def _selection(item: LineItem) -> str:
    return "selected" if item.is_selected else "deselected"


def _variant(item: LineItem) -> str:
    return item.variant_name or item.variant_id or EMPTY


def _money(amount: Decimal | None) -> str:
    return EMPTY if amount is None else f"${amount:.2f}"


@traced_engine("line_item_diff", "1.0")
def diff_line_items(
    before: Sequence[LineItem],
    after: Sequence[LineItem],
) -> list[FieldChange]:
    """
    Diff two line-item collections keyed by ``service_id``.

    Position is irrelevant.  Removed services come first, then services
    in ``after`` order.  A newly added service yields a single entry; a
    service present on both sides yields up to three (selection, variant,
    override price).
    """
    before_by_id = {li.service_id: li for li in before}
    after_by_id = {li.service_id: li for li in after}

    changes: list[FieldChange] = []
    for service_id, old in before_by_id.items():
        if service_id not in after_by_id:
            changes.append(FieldChange(_service_field(old), "included", "removed"))

    for service_id, new in after_by_id.items():
        old = before_by_id.get(service_id)
        if old is None:
            changes.append(FieldChange(_service_field(new), EMPTY, "added"))
            continue

        label = _service_field(new, old)
        if old.is_selected != new.is_selected:
            changes.append(FieldChange(label, _selection(old), _selection(new)))
        if old.variant_id != new.variant_id:
            changes.append(FieldChange(label, _variant(old), _variant(new)))
        if old.override_price != new.override_price:
            changes.append(
                FieldChange(label, _money(old.override_price), _money(new.override_price))
            )
    return changes
