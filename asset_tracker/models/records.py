"""
Журналы движения: закупки, перемещения, выдачи, списания.
Записи только добавляются. Каждая хранит id ссылок и JSON-копию
связанных сущностей (актив, база, пользователь) на момент создания.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import String, DateTime, Date, Text, Integer, Numeric, JSON
from sqlalchemy.orm import Mapped, mapped_column
import enum

from asset_tracker.database import Base
from asset_tracker.utils.clock import utcnow


class TransferStatus(str, enum.Enum):
    initiated = "initiated"
    in_transit = "in_transit"
    received = "received"
    cancelled = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (TransferStatus.received, TransferStatus.cancelled)

    def can_transition_to(self, target: "TransferStatus") -> bool:
        """Только вперёд: initiated → in_transit → received; отмена из любого нетерминального."""
        return target in TRANSFER_TRANSITIONS[self]


TRANSFER_TRANSITIONS: dict[TransferStatus, frozenset[TransferStatus]] = {
    TransferStatus.initiated: frozenset({TransferStatus.in_transit, TransferStatus.cancelled}),
    TransferStatus.in_transit: frozenset({TransferStatus.received, TransferStatus.cancelled}),
    TransferStatus.received: frozenset(),
    TransferStatus.cancelled: frozenset(),
}


class Purchase(Base):
    __tablename__ = "purchases"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # Порядок добавления (для отображения «сначала новые»)
    seq: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    asset_id: Mapped[str] = mapped_column(String(64), nullable=False)
    equipment_type_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    asset: Mapped[dict] = mapped_column(JSON, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_cost: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    total_cost: Mapped[Decimal] = mapped_column(Numeric(16, 2), nullable=False)
    purchase_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    supplier_info: Mapped[str] = mapped_column(Text, nullable=False)
    receiving_base_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    receiving_base: Mapped[dict] = mapped_column(JSON, nullable=False)
    purchase_order_number: Mapped[str] = mapped_column(String(128), nullable=True)
    recorded_by_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    recorded_by_user: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Transfer(Base):
    __tablename__ = "transfers"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    seq: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    asset_id: Mapped[str] = mapped_column(String(64), nullable=False)
    equipment_type_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    asset: Mapped[dict] = mapped_column(JSON, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    source_base_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    source_base: Mapped[dict] = mapped_column(JSON, nullable=False)
    destination_base_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    destination_base: Mapped[dict] = mapped_column(JSON, nullable=False)
    transfer_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[TransferStatus] = mapped_column(default=TransferStatus.initiated, nullable=False)
    initiated_by_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    initiated_by_user: Mapped[dict] = mapped_column(JSON, nullable=False)
    received_by_user_id: Mapped[str] = mapped_column(String(64), nullable=True)
    received_by_user: Mapped[dict] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=True)


class Assignment(Base):
    __tablename__ = "assignments"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    seq: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    asset_id: Mapped[str] = mapped_column(String(64), nullable=False)
    equipment_type_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    asset: Mapped[dict] = mapped_column(JSON, nullable=False)
    assigned_to_personnel_id: Mapped[str] = mapped_column(String(64), nullable=False)
    assigned_to: Mapped[dict] = mapped_column(JSON, nullable=False)
    assignment_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    base_of_assignment_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    base_of_assignment: Mapped[dict] = mapped_column(JSON, nullable=False)
    purpose: Mapped[str] = mapped_column(Text, nullable=False)
    expected_return_date: Mapped[date] = mapped_column(Date, nullable=True)
    returned_date: Mapped[date] = mapped_column(Date, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    recorded_by_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    recorded_by_user: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Expenditure(Base):
    __tablename__ = "expenditures"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    seq: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    asset_id: Mapped[str] = mapped_column(String(64), nullable=False)
    equipment_type_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    asset: Mapped[dict] = mapped_column(JSON, nullable=False)
    quantity_expended: Mapped[int] = mapped_column(Integer, nullable=False)
    expenditure_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    base_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    base: Mapped[dict] = mapped_column(JSON, nullable=False)
    reason: Mapped[str] = mapped_column(Text, nullable=False)
    reported_by_user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    reported_by_user: Mapped[dict] = mapped_column(JSON, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)
