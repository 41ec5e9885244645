from __future__ import annotations

import ipaddress

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_ip_address(value: str, field_name: str = "address") -> str:
    value = require_non_empty(value, field_name)
    try:
        ipaddress.ip_address(value)
    except ValueError:
        raise ValidationError(f"{field_name} is not a valid IP address: {value!r}") from None
    return value


def require_port(value, field_name: str = "port") -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer") from None
    if not 1 <= port <= 65535:
        raise ValidationError(f"{field_name} must be between 1 and 65535")
    return port
