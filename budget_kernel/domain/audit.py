"""
Audit trail value objects.

Each ``AuditEntry`` records who changed what, when, with a one-line human
summary and JSON snapshots of the entity before and after the change.
``FieldChange`` is the atomic unit produced by the diff engine and rendered
into that summary.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class AuditEntityType(str, Enum):
    """Entity kinds that produce audit entries."""
    BUDGET = "budget"
    VENDOR = "vendor"
    SERVICE = "service"
    SUBURB = "suburb"
    SCHEDULE = "schedule"


class AuditAction(str, Enum):
    """Actions that create an audit entry."""
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    STATUS_CHANGE = "statusChange"
    SEED = "seed"
    IMPORT = "import"


@dataclass(frozen=True)
class FieldChange:
    """A single human-readable field transition."""
    field: str
    from_value: str
    to_value: str


@dataclass(frozen=True)
class AuditEntry:
    """
    One immutable audit record.

    ``before`` is None for create/seed/import, ``after`` is None for delete.
    Both are JSON strings when present.
    """
    timestamp: datetime
    user: str
    entity_type: AuditEntityType
    entity_id: int | None
    entity_label: str
    action: AuditAction
    summary: str
    before: str | None = None
    after: str | None = None
    id: int | None = None


class AuditFailurePolicy(str, Enum):
    """What the audit decorator does when the audit store fails."""
    PROPAGATE = "propagate"
    SUPPRESS = "suppress"
