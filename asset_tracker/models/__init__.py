from asset_tracker.models.user import User
from asset_tracker.models.reference import MilitaryBase, EquipmentType, Asset, Personnel
from asset_tracker.models.records import Purchase, Transfer, Assignment, Expenditure

__all__ = [
    "User",
    "MilitaryBase",
    "EquipmentType",
    "Asset",
    "Personnel",
    "Purchase",
    "Transfer",
    "Assignment",
    "Expenditure",
]
