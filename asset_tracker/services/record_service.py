"""
Хранилище записей: добавление закупок, перемещений, выдач и списаний.
Сервис — единственный страж инвариантов: проверяет права и данные до любой записи в БД,
присваивает id/порядковый номер/время и сохраняет копии связанных сущностей.
Добавление выполняется под блокировкой писателя до commit включительно:
запись и изменение остатка фиксируются вместе, следующая проверка видит уже зафиксированный остаток.
"""
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from asset_tracker.database import write_lock
from asset_tracker.exceptions import ValidationError
from asset_tracker.models import (
    Asset,
    Assignment,
    Expenditure,
    MilitaryBase,
    Personnel,
    Purchase,
    Transfer,
    User,
)
from asset_tracker.models.records import TransferStatus
from asset_tracker.repositories import record_repo, reference_repo
from asset_tracker.schemas.records import (
    AssignmentCreate,
    ExpenditureCreate,
    PurchaseCreate,
    TransferCreate,
)
from asset_tracker.services import access_policy
from asset_tracker.utils.clock import new_record_id, utcnow

logger = logging.getLogger(__name__)


def _require_text(*values: str | None) -> None:
    if any(not (v or "").strip() for v in values):
        raise ValidationError("Please fill in all required fields")


def validate_purchase(data: PurchaseCreate) -> None:
    _require_text(data.supplier_info)
    if data.quantity <= 0 or data.unit_cost <= 0:
        raise ValidationError("Quantity and unit cost must be positive numbers")


def validate_transfer(data: TransferCreate) -> None:
    _require_text(data.reason)
    if data.source_base_id == data.destination_base_id:
        raise ValidationError("Source and destination bases must be different")
    if data.quantity <= 0:
        raise ValidationError("Quantity must be a positive number")


def validate_assignment(data: AssignmentCreate, asset: Asset) -> None:
    """Выдавать можно только штучную технику, расходники — нельзя."""
    _require_text(data.purpose)
    if asset.is_fungible:
        raise ValidationError("Only non-fungible assets can be assigned to personnel")


def validate_expenditure(data: ExpenditureCreate, asset: Asset) -> None:
    _require_text(data.reason)
    if data.quantity_expended <= 0:
        raise ValidationError("Quantity must be a positive number")
    if not asset.is_fungible:
        raise ValidationError("Only fungible assets can be expended")
    if data.quantity_expended > asset.current_balance:
        raise ValidationError(
            f"Insufficient quantity available. Current balance: {asset.current_balance}"
        )


async def _resolve_asset(db: AsyncSession, asset_id: str) -> Asset:
    asset = await reference_repo.get_asset_by_id(db, asset_id)
    if asset is None:
        raise ValidationError("Invalid asset or base selection")
    return asset


async def _resolve_base(db: AsyncSession, base_id: str) -> MilitaryBase:
    base = await reference_repo.get_base_by_id(db, base_id)
    if base is None:
        raise ValidationError("Invalid asset or base selection")
    return base


async def _resolve_personnel(db: AsyncSession, personnel_id: str) -> Personnel:
    person = await reference_repo.get_personnel_by_id(db, personnel_id)
    if person is None:
        raise ValidationError("Invalid asset, personnel, or base selection")
    return person


async def add_purchase(db: AsyncSession, data: PurchaseCreate, user: User) -> Purchase:
    """Добавляет закупку. total_cost = quantity × unit_cost считается здесь."""
    access_policy.ensure_can_write(user)
    async with write_lock():
        asset = await _resolve_asset(db, data.asset_id)
        base = await _resolve_base(db, data.receiving_base_id)
        access_policy.ensure_can_mutate(user, base.id, "receive purchases")
        validate_purchase(data)
        purchase = Purchase(
            id=new_record_id("purchase"),
            seq=await record_repo.next_seq(db, Purchase),
            asset_id=asset.id,
            equipment_type_id=asset.equipment_type_id,
            asset=asset.snapshot(),
            quantity=data.quantity,
            unit_cost=data.unit_cost,
            total_cost=data.unit_cost * data.quantity,
            purchase_date=data.purchase_date,
            supplier_info=data.supplier_info.strip(),
            receiving_base_id=base.id,
            receiving_base=base.snapshot(),
            purchase_order_number=(data.purchase_order_number or "").strip() or None,
            recorded_by_user_id=user.id,
            recorded_by_user=user.snapshot(),
            created_at=utcnow(),
        )
        db.add(purchase)
        await db.commit()
    logger.info(
        "purchase_recorded purchase_id=%s asset_id=%s base_id=%s quantity=%s user_id=%s",
        purchase.id, asset.id, base.id, purchase.quantity, user.id,
    )
    return purchase


async def add_transfer(db: AsyncSession, data: TransferCreate, user: User) -> Transfer:
    """Добавляет перемещение в статусе initiated. Право нужно на базу-отправитель."""
    access_policy.ensure_can_write(user)
    async with write_lock():
        validate_transfer(data)
        asset = await _resolve_asset(db, data.asset_id)
        source = await _resolve_base(db, data.source_base_id)
        destination = await _resolve_base(db, data.destination_base_id)
        access_policy.ensure_can_mutate(user, source.id, "transfer from")
        transfer = Transfer(
            id=new_record_id("transfer"),
            seq=await record_repo.next_seq(db, Transfer),
            asset_id=asset.id,
            equipment_type_id=asset.equipment_type_id,
            asset=asset.snapshot(),
            quantity=data.quantity,
            source_base_id=source.id,
            source_base=source.snapshot(),
            destination_base_id=destination.id,
            destination_base=destination.snapshot(),
            transfer_date=data.transfer_date,
            reason=data.reason.strip(),
            status=TransferStatus.initiated,
            initiated_by_user_id=user.id,
            initiated_by_user=user.snapshot(),
            created_at=utcnow(),
        )
        db.add(transfer)
        await db.commit()
    logger.info(
        "transfer_initiated transfer_id=%s asset_id=%s source=%s destination=%s quantity=%s user_id=%s",
        transfer.id, asset.id, source.id, destination.id, transfer.quantity, user.id,
    )
    return transfer


async def add_assignment(db: AsyncSession, data: AssignmentCreate, user: User) -> Assignment:
    """Выдача штучной техники военнослужащему; запись активна до возврата."""
    access_policy.ensure_can_write(user)
    async with write_lock():
        asset = await _resolve_asset(db, data.asset_id)
        base = await _resolve_base(db, data.base_of_assignment_id)
        person = await _resolve_personnel(db, data.assigned_to_personnel_id)
        access_policy.ensure_can_mutate(user, base.id, "assign assets")
        validate_assignment(data, asset)
        assignment = Assignment(
            id=new_record_id("assignment"),
            seq=await record_repo.next_seq(db, Assignment),
            asset_id=asset.id,
            equipment_type_id=asset.equipment_type_id,
            asset=asset.snapshot(),
            assigned_to_personnel_id=person.id,
            assigned_to=person.snapshot(),
            assignment_date=data.assignment_date,
            base_of_assignment_id=base.id,
            base_of_assignment=base.snapshot(),
            purpose=data.purpose.strip(),
            expected_return_date=data.expected_return_date,
            is_active=True,
            recorded_by_user_id=user.id,
            recorded_by_user=user.snapshot(),
            created_at=utcnow(),
        )
        db.add(assignment)
        await db.commit()
    logger.info(
        "asset_assigned assignment_id=%s asset_id=%s personnel_id=%s base_id=%s user_id=%s",
        assignment.id, asset.id, person.id, base.id, user.id,
    )
    return assignment


async def add_expenditure(db: AsyncSession, data: ExpenditureCreate, user: User) -> Expenditure:
    """
    Списание расходника. Количество не больше текущего остатка актива;
    остаток уменьшается в той же транзакции, что и добавление записи.
    """
    access_policy.ensure_can_write(user)
    async with write_lock():
        asset = await _resolve_asset(db, data.asset_id)
        base = await _resolve_base(db, data.base_id)
        access_policy.ensure_can_mutate(user, base.id, "record expenditures")
        validate_expenditure(data, asset)
        expenditure = Expenditure(
            id=new_record_id("expenditure"),
            seq=await record_repo.next_seq(db, Expenditure),
            asset_id=asset.id,
            equipment_type_id=asset.equipment_type_id,
            asset=asset.snapshot(),
            quantity_expended=data.quantity_expended,
            expenditure_date=data.expenditure_date,
            base_id=base.id,
            base=base.snapshot(),
            reason=data.reason.strip(),
            reported_by_user_id=user.id,
            reported_by_user=user.snapshot(),
            created_at=utcnow(),
        )
        asset.current_balance -= data.quantity_expended
        db.add(expenditure)
        await db.commit()
    logger.info(
        "asset_expended expenditure_id=%s asset_id=%s base_id=%s quantity=%s balance=%s user_id=%s",
        expenditure.id, asset.id, base.id, expenditure.quantity_expended, asset.current_balance, user.id,
    )
    return expenditure
