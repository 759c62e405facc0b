"""Внешний сервис идентификаторов и времени для новых записей."""
import uuid
from datetime import date, datetime, timezone


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def today() -> date:
    return utcnow().date()


def new_record_id(kind: str) -> str:
    """Непрозрачный уникальный id записи: purchase-3f2a..."""
    return f"{kind}-{uuid.uuid4().hex[:16]}"
