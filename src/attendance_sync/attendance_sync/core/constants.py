"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_DEDUP_WINDOW_SECONDS = 50

DEFAULT_DEVICE_PORT = 4370
SECONDARY_DEVICE_PORT = 4360
WEB_PORTS = (80, 8080)
DEFAULT_DEVICE_TIMEOUT_SECONDS = 10
UNKNOWN_HARDWARE_ADDRESS = "Unknown"

DEFAULT_DISCOVERY_WORKERS = 100
DEFAULT_DISCOVERY_TIMEOUT_MS = 300

DEFAULT_SYNC_API_URL = "https://api.alagappa.org"
DEFAULT_SYNC_TIMEOUT_SECONDS = 30
BULK_ATTENDANCE_PATH = "/api/v1/attendance/faculty-attendance/bulk/"
VERIFY_API_KEY_PATH = "/api/v1/access-control/api-keys/verify/"
