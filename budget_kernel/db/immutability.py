"""
ORM-level immutability for the audit trail.

Audit entries are append-only.  SQLAlchemy fires ``before_update`` and
``before_delete`` mapper events before SQL reaches the database; the
listeners below raise ``ImmutabilityViolationError`` so the flush aborts
and nothing is written.

The one sanctioned way to empty the trail is ``SqlAuditLogger.clear()``,
which issues a bulk ``DELETE`` statement.  Bulk statements bypass mapper
events, so clearing works while per-row edits stay blocked.

Usage:

    from budget_kernel.db.immutability import register_immutability_listeners
    register_immutability_listeners()  # create_tables() does this

To temporarily disable (TESTS ONLY):

    unregister_immutability_listeners()
"""

from sqlalchemy import event

from budget_kernel.exceptions import ImmutabilityViolationError
from budget_kernel.logging_config import get_logger

logger = get_logger("db.immutability")


def _check_audit_entry_immutability(mapper, connection, target):
    """Prevent any updates to AuditEntryModel rows."""
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "AuditEntry",
            "entity_id": str(target.id),
            "operation": "UPDATE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type="AuditEntry",
        entity_id=str(target.id),
        reason="Audit entries are immutable and cannot be modified",
    )


def _check_audit_entry_delete(mapper, connection, target):
    """Prevent deletion of individual AuditEntryModel rows."""
    logger.error(
        "immutability_violation_blocked",
        extra={
            "entity_type": "AuditEntry",
            "entity_id": str(target.id),
            "operation": "DELETE",
        },
    )
    raise ImmutabilityViolationError(
        entity_type="AuditEntry",
        entity_id=str(target.id),
        reason="Audit entries cannot be deleted",
    )


def register_immutability_listeners():
    """Register the audit entry listeners.  Safe to call more than once."""
    from budget_kernel.models.audit_entry import AuditEntryModel

    if not event.contains(AuditEntryModel, "before_update", _check_audit_entry_immutability):
        event.listen(AuditEntryModel, "before_update", _check_audit_entry_immutability)
    if not event.contains(AuditEntryModel, "before_delete", _check_audit_entry_delete):
        event.listen(AuditEntryModel, "before_delete", _check_audit_entry_delete)


def _safe_remove_listener(target, event_name, listener_fn):
    if event.contains(target, event_name, listener_fn):
        event.remove(target, event_name, listener_fn)


def unregister_immutability_listeners():
    """
    Remove the audit entry listeners.

    WARNING: Only use this in tests that need to violate immutability on
    purpose.
    """
    from budget_kernel.models.audit_entry import AuditEntryModel

    _safe_remove_listener(AuditEntryModel, "before_update", _check_audit_entry_immutability)
    _safe_remove_listener(AuditEntryModel, "before_delete", _check_audit_entry_delete)
