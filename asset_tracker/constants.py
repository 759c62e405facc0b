"""
Единый источник истины для лейблов и справочных значений.
Используется в схемах ответов, отчётах и обработчиках ошибок.
"""

# --- Роли пользователя (UserRole) ---
ROLE_LABELS = {
    "admin": "Admin",
    "base_commander": "Base Commander",
    "logistics_officer": "Logistics Officer",
}


def _label(labels: dict, value) -> str:
    if value is None:
        return "—"
    val = value.value if hasattr(value, "value") else value
    return labels.get(val, val or "—")


def role_label(role) -> str:
    return _label(ROLE_LABELS, role)


# --- Категории техники (EquipmentCategory) ---
CATEGORY_LABELS = {
    "ground": "Ground",
    "air": "Air",
    "consumable": "Consumable",
    "heavy_weaponry": "Heavy Weaponry",
}


def category_label(category) -> str:
    return _label(CATEGORY_LABELS, category)


# --- Состояние актива (AssetStatus) ---
ASSET_STATUS_LABELS = {
    "operational": "Operational",
    "maintenance": "Maintenance",
    "damaged": "Damaged",
    "decommissioned": "Decommissioned",
}


def asset_status_label(status) -> str:
    return _label(ASSET_STATUS_LABELS, status)


# --- Статусы перемещения (TransferStatus) ---
TRANSFER_STATUS_LABELS = {
    "initiated": "Initiated",
    "in_transit": "In Transit",
    "received": "Received",
    "cancelled": "Cancelled",
}


def transfer_status_label(status) -> str:
    return _label(TRANSFER_STATUS_LABELS, status)


# --- Коды ошибок для JSON-ответов ---
HTTP_STATUS_TO_CODE = {
    400: "bad_request",
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    422: "validation_error",
    500: "server_error",
}
