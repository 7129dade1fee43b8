"""Display formatting for drivers."""

from collections.abc import Mapping
from typing import Any

from cja_picks.utils.constants import UNKNOWN_DRIVER_LABEL


def format_driver_name(driver: Mapping[str, Any] | None) -> str:
    """Format a driver as '#<number> <full name>', falling back to the short name."""
    if not driver:
        return UNKNOWN_DRIVER_LABEL

    full_name = f"{driver.get('first_name') or ''} {driver.get('last_name') or ''}".strip()
    display_name = full_name or driver.get("short_name") or "Unknown"

    if driver.get("driver_number"):
        return f"#{driver['driver_number']} {display_name}"
    return display_name
