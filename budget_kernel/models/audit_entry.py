"""
Module: budget_kernel.models.audit_entry
Responsibility: ORM persistence for the human-readable audit trail.
Architecture position: Kernel > Models.  May import from db/base.py and
    the domain audit types.

Invariants enforced:
    - Audit rows are append-only.  ORM listeners in db/immutability.py
      reject UPDATE and per-row DELETE.  Only the bulk clear issued by
      SqlAuditLogger.clear() removes rows.

Failure modes:
    - ImmutabilityViolationError on any UPDATE or row DELETE.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import Base, UTCDateTime
from budget_kernel.domain.audit import AuditAction, AuditEntityType, AuditEntry


class AuditEntryModel(Base):
    """
    One audit record.

    ``before`` and ``after`` hold JSON snapshots of the entity as text;
    ``summary`` is the one-line description shown to users.
    """

    __tablename__ = "audit_log"

    __table_args__ = (
        Index("idx_audit_entity", "entity_type", "entity_id"),
        Index("idx_audit_timestamp", "timestamp"),
    )

    timestamp: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    user: Mapped[str] = mapped_column(String(200), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(20), nullable=False)
    entity_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    entity_label: Mapped[str] = mapped_column(String(500), nullable=False)
    action: Mapped[str] = mapped_column(String(20), nullable=False)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    before: Mapped[str | None] = mapped_column(Text, nullable=True)
    after: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<AuditEntry {self.action} on {self.entity_type}:{self.entity_id}>"

    def to_dto(self) -> AuditEntry:
        return AuditEntry(
            id=self.id,
            timestamp=self.timestamp,
            user=self.user,
            entity_type=AuditEntityType(self.entity_type),
            entity_id=self.entity_id,
            entity_label=self.entity_label,
            action=AuditAction(self.action),
            summary=self.summary,
            before=self.before,
            after=self.after,
        )

    @classmethod
    def from_dto(cls, dto: AuditEntry) -> AuditEntryModel:
        return cls(
            timestamp=dto.timestamp,
            user=dto.user,
            entity_type=dto.entity_type.value,
            entity_id=dto.entity_id,
            entity_label=dto.entity_label,
            action=dto.action.value,
            summary=dto.summary,
            before=dto.before,
            after=dto.after,
        )
