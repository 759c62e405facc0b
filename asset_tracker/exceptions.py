"""
Ошибки предметной области. Сервисы их выбрасывают, роутеры не перехватывают:
перевод в HTTP-ответ — в обработчиках исключений main.py.
"""


class AssetTrackerError(Exception):
    """Базовая ошибка приложения."""

    status_code = 400
    code = "bad_request"


class ValidationError(AssetTrackerError, ValueError):
    """Запись нарушает структурный инвариант; в хранилище ничего не добавлено."""

    status_code = 422
    code = "validation_error"


class AuthorizationError(AssetTrackerError):
    """Действие или просмотр за пределами разрешённых баз пользователя."""

    status_code = 403
    code = "forbidden"


class PreconditionError(AssetTrackerError):
    """Некорректный фильтр (например, конец периода раньше начала)."""

    status_code = 400
    code = "bad_request"


class AuthenticationError(AssetTrackerError):
    status_code = 401
    code = "unauthorized"
