"""
DTO журналов движения. *Create — входные данные операций добавления (ссылки по id,
без id/created_at записи); *Out — записи в ответах API и в разбивке дашборда.
Проверки инвариантов выполняет record_service, а не схема.
"""
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from asset_tracker.models.records import TransferStatus
from asset_tracker.utils.clock import today


class PurchaseCreate(BaseModel):
    asset_id: str
    quantity: int
    unit_cost: Decimal
    purchase_date: date = Field(default_factory=today)
    supplier_info: str
    receiving_base_id: str
    purchase_order_number: str | None = None


class TransferCreate(BaseModel):
    asset_id: str
    quantity: int
    source_base_id: str
    destination_base_id: str
    transfer_date: date = Field(default_factory=today)
    reason: str


class AssignmentCreate(BaseModel):
    asset_id: str
    assigned_to_personnel_id: str
    assignment_date: date = Field(default_factory=today)
    base_of_assignment_id: str
    purpose: str
    expected_return_date: date | None = None


class ExpenditureCreate(BaseModel):
    asset_id: str
    quantity_expended: int
    expenditure_date: date = Field(default_factory=today)
    base_id: str
    reason: str


class _RecordOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    asset_id: str
    equipment_type_id: str
    asset: dict
    created_at: datetime | None = None


class PurchaseOut(_RecordOut):
    quantity: int
    unit_cost: Decimal
    total_cost: Decimal
    purchase_date: date
    supplier_info: str
    receiving_base_id: str
    receiving_base: dict
    purchase_order_number: str | None = None
    recorded_by_user_id: str
    recorded_by_user: dict


class TransferOut(_RecordOut):
    quantity: int
    source_base_id: str
    source_base: dict
    destination_base_id: str
    destination_base: dict
    transfer_date: date
    reason: str
    status: TransferStatus
    initiated_by_user_id: str
    initiated_by_user: dict
    received_by_user_id: str | None = None
    received_by_user: dict | None = None
    completed_at: datetime | None = None


class AssignmentOut(_RecordOut):
    assigned_to_personnel_id: str
    assigned_to: dict
    assignment_date: date
    base_of_assignment_id: str
    base_of_assignment: dict
    purpose: str
    expected_return_date: date | None = None
    returned_date: date | None = None
    is_active: bool
    recorded_by_user_id: str
    recorded_by_user: dict


class ExpenditureOut(_RecordOut):
    quantity_expended: int
    expenditure_date: date
    base_id: str
    base: dict
    reason: str
    reported_by_user_id: str
    reported_by_user: dict


class PurchaseSummary(BaseModel):
    count: int
    total_quantity: int
    total_value: Decimal


class TransferSummary(BaseModel):
    count: int
    open: int
    by_status: dict[str, int]


class AssignmentSummary(BaseModel):
    active: int
    returned: int
    overdue: int


class ExpenditureSummary(BaseModel):
    count: int
    total_quantity: int
    this_month: int


class PurchaseList(BaseModel):
    items: list[PurchaseOut]
    summary: PurchaseSummary


class TransferList(BaseModel):
    items: list[TransferOut]
    summary: TransferSummary


class AssignmentList(BaseModel):
    items: list[AssignmentOut]
    summary: AssignmentSummary


class ExpenditureList(BaseModel):
    items: list[ExpenditureOut]
    summary: ExpenditureSummary
