from datetime import datetime
from sqlalchemy import String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column
import enum

from asset_tracker.database import Base
from asset_tracker.utils.clock import utcnow


class UserRole(str, enum.Enum):
    admin = "admin"
    base_commander = "base_commander"
    logistics_officer = "logistics_officer"


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(256), nullable=True)
    full_name: Mapped[str] = mapped_column(String(256), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(256), nullable=False)
    role: Mapped[UserRole] = mapped_column(
        default=UserRole.logistics_officer,
        nullable=False
    )
    # Разрешённые базы (id); admin видит все базы, для него поле не используется
    assigned_base_ids: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    @property
    def authorized_bases(self) -> frozenset[str]:
        return frozenset(self.assigned_base_ids or ())

    def snapshot(self) -> dict:
        """Копия пользователя для записи «кто внёс» (без хеша пароля)."""
        return {
            "id": self.id,
            "username": self.username,
            "full_name": self.full_name,
            "role": self.role.value,
        }
