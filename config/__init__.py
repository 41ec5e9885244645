import os


def get_settings_module() -> str:
    # APP_ENV selects the settings module; defaults to development
    env = os.getenv("APP_ENV", "development").lower()

    if env in {"prod", "production"}:
        return "config.production"

    if env in {"test", "testing"}:
        return "config.testing"

    return "config.development"


def parse_employee_map(value: str | None) -> dict[int, int]:
    """Parse "device_id:hr_id" pairs separated by commas, e.g. "7:1007,8:1008"."""
    mapping: dict[int, int] = {}
    for pair in (value or "").split(","):
        pair = pair.strip()
        if not pair:
            continue
        device_id, _, hr_id = pair.partition(":")
        mapping[int(device_id)] = int(hr_id)
    return mapping
