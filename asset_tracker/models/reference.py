"""Справочные данные: базы, типы техники, активы, личный состав."""
from __future__ import annotations

from datetime import datetime
from sqlalchemy import String, DateTime, ForeignKey, Text, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship
import enum

from asset_tracker.database import Base
from asset_tracker.utils.clock import utcnow


class EquipmentCategory(str, enum.Enum):
    ground = "ground"
    air = "air"
    consumable = "consumable"
    heavy_weaponry = "heavy_weaponry"


class AssetStatus(str, enum.Enum):
    operational = "operational"
    maintenance = "maintenance"
    damaged = "damaged"
    decommissioned = "decommissioned"


class MilitaryBase(Base):
    __tablename__ = "bases"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    location: Mapped[str] = mapped_column(String(256), nullable=True)
    description: Mapped[str] = mapped_column(Text, nullable=True)

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "description": self.description,
        }


class EquipmentType(Base):
    __tablename__ = "equipment_types"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    category: Mapped[EquipmentCategory] = mapped_column(nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=True)

    assets: Mapped[list["Asset"]] = relationship("Asset", back_populates="equipment_type")

    @property
    def is_fungible(self) -> bool:
        """Расходные материалы учитываются остатком, а не поштучно."""
        return self.category == EquipmentCategory.consumable

    def snapshot(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category.value,
            "description": self.description,
        }


class Asset(Base):
    __tablename__ = "assets"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    equipment_type_id: Mapped[str] = mapped_column(ForeignKey("equipment_types.id"), nullable=False, index=True)
    model_name: Mapped[str] = mapped_column(String(256), nullable=False)
    serial_number: Mapped[str] = mapped_column(String(128), nullable=True)
    current_base_id: Mapped[str] = mapped_column(ForeignKey("bases.id"), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    status: Mapped[AssetStatus] = mapped_column(default=AssetStatus.operational, nullable=False)
    # Инвариант: is_fungible совпадает с категорией «consumable» типа техники
    is_fungible: Mapped[bool] = mapped_column(default=False, nullable=False)
    # Фактический остаток; для расходников уменьшается при списании
    current_balance: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    equipment_type: Mapped["EquipmentType"] = relationship(
        "EquipmentType", back_populates="assets", lazy="selectin"
    )

    def snapshot(self) -> dict:
        """Копия актива на момент создания записи; поздние изменения справочника её не трогают."""
        return {
            "id": self.id,
            "equipment_type_id": self.equipment_type_id,
            "equipment_type": self.equipment_type.snapshot() if self.equipment_type else None,
            "model_name": self.model_name,
            "serial_number": self.serial_number,
            "current_base_id": self.current_base_id,
            "quantity": self.quantity,
            "status": self.status.value,
            "is_fungible": self.is_fungible,
            "current_balance": self.current_balance,
        }


class Personnel(Base):
    """Справочник личного состава, которому выдаётся техника."""
    __tablename__ = "personnel"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(256), nullable=False)
    rank: Mapped[str] = mapped_column(String(32), nullable=True)
    unit: Mapped[str] = mapped_column(String(256), nullable=True)

    def snapshot(self) -> dict:
        return {"id": self.id, "name": self.name, "rank": self.rank, "unit": self.unit}
