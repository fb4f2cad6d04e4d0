"""
Audit store contract and its SQLAlchemy implementation.

``AuditLogger.log`` appends one entry and returns it with its assigned id.
Entries are never updated.  ``clear`` empties the whole trail and is only
called when all application data is cleared.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from budget_kernel.domain.audit import AuditEntityType, AuditEntry
from budget_kernel.logging_config import get_logger
from budget_kernel.models.audit_entry import AuditEntryModel

logger = get_logger("services.audit_logger")


class AuditLogger(ABC):
    """Append-only store of audit entries."""

    @abstractmethod
    def log(self, entry: AuditEntry) -> AuditEntry: ...

    @abstractmethod
    def get_by_entity(
        self, entity_type: AuditEntityType, entity_id: int,
    ) -> list[AuditEntry]:
        """Entries for one entity, newest first."""

    @abstractmethod
    def get_all(self, limit: int | None = None) -> list[AuditEntry]:
        """All entries, newest first."""

    @abstractmethod
    def clear(self) -> None: ...


class SqlAuditLogger(AuditLogger):
    """
    Audit store on the ``audit_log`` table.

    Each call owns its transaction.  ``clear`` uses a bulk DELETE, which
    bypasses the per-row immutability listeners.
    """

    def __init__(self, session: Session):
        self._session = session

    def log(self, entry: AuditEntry) -> AuditEntry:
        model = AuditEntryModel.from_dto(entry)
        try:
            self._session.add(model)
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        logger.info(
            "audit_entry_logged",
            extra={
                "audit_id": model.id,
                "entity_type": entry.entity_type.value,
                "entity_id": entry.entity_id,
                "action": entry.action.value,
            },
        )
        return model.to_dto()

    def get_by_entity(
        self, entity_type: AuditEntityType, entity_id: int,
    ) -> list[AuditEntry]:
        rows = self._session.scalars(
            select(AuditEntryModel)
            .where(
                AuditEntryModel.entity_type == AuditEntityType(entity_type).value,
                AuditEntryModel.entity_id == entity_id,
            )
            .order_by(AuditEntryModel.timestamp.desc(), AuditEntryModel.id.desc())
        )
        return [r.to_dto() for r in rows]

    def get_all(self, limit: int | None = None) -> list[AuditEntry]:
        stmt = select(AuditEntryModel).order_by(
            AuditEntryModel.timestamp.desc(), AuditEntryModel.id.desc()
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        return [r.to_dto() for r in self._session.scalars(stmt)]

    def clear(self) -> None:
        try:
            result = self._session.execute(
                delete(AuditEntryModel).execution_options(synchronize_session=False)
            )
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise
        logger.warning("audit_log_cleared", extra={"deleted_count": result.rowcount})
