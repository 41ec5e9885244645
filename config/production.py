import os

from config import parse_employee_map

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendance_sync"),
}

STORE_BACKEND = os.getenv("STORE_BACKEND", "mysql")

SYNC_API_URL = os.getenv("SYNC_API_URL", "https://api.alagappa.org")
SYNC_API_KEY = os.getenv("SYNC_API_KEY", "")
SYNC_TIMEOUT_SECONDS = float(os.getenv("SYNC_TIMEOUT_SECONDS", "30"))
EMPLOYEE_MAP = parse_employee_map(os.getenv("EMPLOYEE_MAP"))

DEDUP_WINDOW_SECONDS = int(os.getenv("DEDUP_WINDOW_SECONDS", "50"))

DEVICE_TIMEOUT_SECONDS = int(os.getenv("DEVICE_TIMEOUT_SECONDS", "60"))
DEVICE_PASSWORD = int(os.getenv("DEVICE_PASSWORD", "0"))
DISCOVERY_WORKERS = int(os.getenv("DISCOVERY_WORKERS", "100"))
DISCOVERY_TIMEOUT_MS = int(os.getenv("DISCOVERY_TIMEOUT_MS", "300"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
DEBUG = False

AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "0")))
