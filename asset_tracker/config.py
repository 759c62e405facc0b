import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

# По умолчанию хранилище живёт в памяти процесса; для файловой БД задать DATABASE_URL
# (например sqlite+aiosqlite:///data/app.db)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-production-secret-key-32chars")
SESSION_COOKIE_NAME = "session"
SESSION_MAX_AGE = 86400 * 7
# Для HTTPS: установить SECURE_COOKIES=true, чтобы cookie отправлялись только по HTTPS
SECURE_COOKIES = os.getenv("SECURE_COOKIES", "false").lower() in ("true", "1", "yes")

# Начальный остаток на дашборде задаётся константой, по истории не считается
OPENING_BALANCE = int(os.getenv("OPENING_BALANCE", "10000"))
# Период дашборда по умолчанию: последние N дней
DEFAULT_RANGE_DAYS = int(os.getenv("DEFAULT_RANGE_DAYS", "30"))

# Заполнять справочники и демо-учётки при старте приложения
SEED_DEMO_DATA = os.getenv("SEED_DEMO_DATA", "true").lower() in ("true", "1", "yes")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATA_DIR = BASE_DIR / "data"
