"""
Политика доступа: какие базы видит пользователь и что ему разрешено записывать.
Чистые функции над пользователем и id баз, без обращений к БД.
"""
from collections.abc import Iterable

from asset_tracker.exceptions import AuthorizationError
from asset_tracker.models import Assignment, Expenditure, Purchase, Transfer, User
from asset_tracker.models.user import UserRole


def _unknown_role(user: User) -> AuthorizationError:
    return AuthorizationError(f"Unknown role: {user.role!r}")


def visible_bases(user: User, all_base_ids: Iterable[str]) -> frozenset[str]:
    """Все базы для admin, иначе — разрешённые базы пользователя."""
    if user.role == UserRole.admin:
        return frozenset(all_base_ids)
    if user.role in (UserRole.base_commander, UserRole.logistics_officer):
        return user.authorized_bases
    raise _unknown_role(user)


def can_mutate(user: User, base_id: str) -> bool:
    if user.role == UserRole.admin:
        return True
    if user.role in (UserRole.base_commander, UserRole.logistics_officer):
        return base_id in user.authorized_bases
    raise _unknown_role(user)


def can_write(user: User) -> bool:
    """Base Commander — только наблюдение; записи создают admin и logistics officer."""
    if user.role in (UserRole.admin, UserRole.logistics_officer):
        return True
    if user.role == UserRole.base_commander:
        return False
    raise _unknown_role(user)


def ensure_can_write(user: User) -> None:
    if not can_write(user):
        raise AuthorizationError("Your role does not allow recording asset movements")


def ensure_can_mutate(user: User, base_id: str, action: str = "record movements") -> None:
    if not can_mutate(user, base_id):
        raise AuthorizationError(f"You do not have permission to {action} at this base")


def ensure_can_view(user: User, base_id: str, all_base_ids: Iterable[str]) -> None:
    if base_id not in visible_bases(user, all_base_ids):
        raise AuthorizationError("You do not have access to this base")


# --- Видимость записей (базовый уровень доступа на страницах журналов) ---

def purchase_visible(purchase: Purchase, bases: frozenset[str]) -> bool:
    return purchase.receiving_base_id in bases


def transfer_visible(transfer: Transfer, bases: frozenset[str]) -> bool:
    """Перемещение видно обеим сторонам: и базе-отправителю, и базе-получателю."""
    return transfer.source_base_id in bases or transfer.destination_base_id in bases


def assignment_visible(assignment: Assignment, bases: frozenset[str]) -> bool:
    return assignment.base_of_assignment_id in bases


def expenditure_visible(expenditure: Expenditure, bases: frozenset[str]) -> bool:
    return expenditure.base_id in bases
