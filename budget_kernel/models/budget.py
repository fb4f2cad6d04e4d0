"""
Module: budget_kernel.models.budget
Responsibility: ORM persistence for property marketing budgets.
Architecture position: Kernel > Models.

A budget owns its line items exclusively, so they live in a JSON column on
the budget row rather than a child table.  Prices inside the JSON are
decimal strings.
"""

from __future__ import annotations

from sqlalchemy import JSON, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from budget_kernel.db.base import TrackedBase
from budget_kernel.domain.snapshots import line_item_from_dict, snapshot
from budget_kernel.domain.types import (
    Budget,
    BudgetStatus,
    BudgetTier,
    PropertySize,
    PropertyType,
)


class BudgetModel(TrackedBase):
    """A property marketing budget row."""

    __tablename__ = "budgets"

    __table_args__ = (
        Index("idx_budget_status", "status"),
        Index("idx_budget_created", "created_at"),
    )

    property_address: Mapped[str] = mapped_column(String(500), nullable=False)
    property_type: Mapped[str] = mapped_column(String(20), nullable=False)
    property_size: Mapped[str] = mapped_column(String(20), nullable=False)
    tier: Mapped[str] = mapped_column(String(20), nullable=False)
    suburb_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    vendor_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    schedule_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    schedule_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    line_items: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    client_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    agent_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=BudgetStatus.DRAFT.value,
    )

    def __repr__(self) -> str:
        return f"<Budget {self.id}: {self.property_address} status={self.status}>"

    def to_dto(self) -> Budget:
        return Budget(
            id=self.id,
            property_address=self.property_address,
            property_type=PropertyType(self.property_type),
            property_size=PropertySize(self.property_size),
            tier=BudgetTier(self.tier),
            suburb_id=self.suburb_id,
            vendor_id=self.vendor_id,
            schedule_id=self.schedule_id,
            schedule_name=self.schedule_name,
            line_items=tuple(line_item_from_dict(li) for li in self.line_items or ()),
            notes=self.notes,
            client_name=self.client_name,
            agent_name=self.agent_name,
            status=BudgetStatus(self.status),
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def apply_dto(self, dto: Budget) -> None:
        """Copy content fields; timestamps are owned by the repository."""
        self.property_address = dto.property_address
        self.property_type = dto.property_type.value
        self.property_size = dto.property_size.value
        self.tier = dto.tier.value
        self.suburb_id = dto.suburb_id
        self.vendor_id = dto.vendor_id
        self.schedule_id = dto.schedule_id
        self.schedule_name = dto.schedule_name
        self.line_items = [snapshot(li, json_safe=True) for li in dto.line_items]
        self.notes = dto.notes
        self.client_name = dto.client_name
        self.agent_name = dto.agent_name
        self.status = dto.status.value

    @classmethod
    def from_dto(cls, dto: Budget) -> BudgetModel:
        model = cls(id=dto.id, created_at=dto.created_at, updated_at=dto.updated_at)
        model.apply_dto(dto)
        return model
