DB_CONFIG = {
    "host": "localhost",
    "port": 3306,
    "user": "root",
    "password": "",
    "database": "attendance_sync_test",
}

STORE_BACKEND = "memory"

SYNC_API_URL = "https://hr.example.test"
SYNC_API_KEY = "test-key"
SYNC_TIMEOUT_SECONDS = 5
EMPLOYEE_MAP = {}

DEDUP_WINDOW_SECONDS = 50

DEVICE_TIMEOUT_SECONDS = 1
DEVICE_PASSWORD = 0
DISCOVERY_WORKERS = 4
DISCOVERY_TIMEOUT_MS = 50

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = False
