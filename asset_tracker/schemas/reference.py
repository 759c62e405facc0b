from pydantic import BaseModel, ConfigDict, computed_field

from asset_tracker.constants import asset_status_label, category_label, role_label
from asset_tracker.models.reference import AssetStatus, EquipmentCategory
from asset_tracker.models.user import UserRole


class BaseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    location: str | None = None
    description: str | None = None


class EquipmentTypeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    category: EquipmentCategory
    description: str | None = None

    @computed_field
    @property
    def category_label(self) -> str:
        return category_label(self.category)


class AssetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    equipment_type_id: str
    equipment_type: EquipmentTypeOut
    model_name: str
    serial_number: str | None = None
    current_base_id: str
    quantity: int
    status: AssetStatus
    is_fungible: bool
    current_balance: int

    @computed_field
    @property
    def status_label(self) -> str:
        return asset_status_label(self.status)


class PersonnelOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    rank: str | None = None
    unit: str | None = None


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    email: str | None = None
    full_name: str
    role: UserRole
    assigned_base_ids: list[str]

    @computed_field
    @property
    def role_label(self) -> str:
        return role_label(self.role)


class LoginRequest(BaseModel):
    username: str
    password: str
