"""
Bookable time slots derived from the restaurant's opening hours.
"""

import logging
from datetime import time

from ..errors import ConfigurationError
from ..schemas import RestaurantHours
from ..settings_store import load_restaurant_hours
from ..utils.time import format_hhmm, from_minutes, to_minutes

logger = logging.getLogger(__name__)

# Offered when the restaurant hours have never been configured.
DEFAULT_TIME_SLOTS = (
    "12:00", "12:30", "13:00", "13:30", "14:00", "14:30", "15:00",
    "15:30", "16:00", "16:30", "17:00", "17:30", "18:00", "18:30",
    "19:00", "19:30", "20:00", "20:30", "21:00", "21:30", "22:00",
)


def generate_slots(open_at: time, close_at: time, interval: int) -> list[str]:
    """
    Returns 'HH:MM' slots from ``open_at`` every ``interval`` minutes, up to
    and including ``close_at`` when it lands on a step.
    """
    if interval <= 0:
        raise ConfigurationError(f"Slot interval must be a positive number of minutes, got {interval}.")
    if open_at > close_at:
        raise ConfigurationError(
            f"Opening time {format_hhmm(open_at)} is after closing time {format_hhmm(close_at)}."
        )

    last = to_minutes(close_at)
    return [format_hhmm(from_minutes(m)) for m in range(to_minutes(open_at), last + 1, interval)]


def slots_for(hours: RestaurantHours | None) -> list[str]:
    if hours is None:
        return list(DEFAULT_TIME_SLOTS)
    return generate_slots(hours.open, hours.close, hours.interval)


def configured_slots() -> list[str]:
    """Slots for the hours currently stored in settings."""
    return slots_for(load_restaurant_hours())
