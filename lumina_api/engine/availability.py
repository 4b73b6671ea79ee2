from dataclasses import dataclass
from datetime import date

from . import catalog, ledger
from .assignment import choose_tables, free_tables
from .slots import configured_slots


@dataclass(frozen=True)
class SlotAvailability:
    time: str
    available: bool

    def to_dict(self):
        return {"time": self.time, "available": self.available}


def availability(on: date, guest_count: int, location: str | None = None) -> list[SlotAvailability]:
    """
    Dry-runs the assignment engine for every bookable slot of the day.

    Reads the catalog and the day's assignments once; nothing is written or
    locked, so a slot reported free can still be taken before booking.
    """
    slots = configured_slots()
    tables = catalog.list_tables(location)
    taken_by_slot = ledger.assigned_table_ids_by_slot(on)

    return [
        SlotAvailability(
            slot,
            choose_tables(free_tables(tables, taken_by_slot.get(slot, set())), guest_count) is not None,
        )
        for slot in slots
    ]
