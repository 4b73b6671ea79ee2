"""
Table assignment: best-fit single table first, greedy largest-first join
second.

``choose_tables`` is the pure decision step. ``find_assignment`` feeds it
the current catalog and ledger snapshot. Availability checks and
reservation writes both go through ``choose_tables``, so they always agree.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from . import catalog, ledger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TableAssignment:
    tables: tuple

    @property
    def table_ids(self) -> list[int]:
        return [t.id for t in self.tables]

    @property
    def total_capacity(self) -> int:
        return sum(t.capacity for t in self.tables)

    @property
    def joined(self) -> bool:
        return len(self.tables) > 1


def free_tables(tables: Iterable, taken_ids: set[int]) -> list:
    return [t for t in tables if t.id not in taken_ids]


def choose_tables(candidates: Sequence, guest_count: int) -> TableAssignment | None:
    """
    Picks tables for a party from free ``candidates`` (in catalog order).

    The smallest single table that seats everyone wins, ties going to the
    earlier candidate, even when a join would waste fewer seats. Otherwise
    joinable tables are taken largest first until the party fits. Returns
    None when neither works.
    """
    best = None
    for table in candidates:
        if table.capacity >= guest_count and (best is None or table.capacity < best.capacity):
            best = table
    if best is not None:
        return TableAssignment((best,))

    # sorted() is stable, so equal capacities keep catalog order
    joinable = sorted((t for t in candidates if t.is_joinable), key=lambda t: t.capacity, reverse=True)
    picked, seats = [], 0
    for table in joinable:
        if seats >= guest_count:
            break
        picked.append(table)
        seats += table.capacity

    if picked and seats >= guest_count:
        return TableAssignment(tuple(picked))
    return None


def find_assignment(guest_count: int, on: date, time_slot: str, location: str | None = None) -> TableAssignment | None:
    """Assignment for a party at (on, time_slot), or None when the slot cannot seat it."""
    tables = catalog.list_tables(location)
    taken = ledger.assigned_table_ids(on, time_slot)
    assignment = choose_tables(free_tables(tables, taken), guest_count)
    logger.debug(
        "Assignment for %s guests at %s %s (%s): %s",
        guest_count, on, time_slot, location or "any", assignment.table_ids if assignment else None,
    )
    return assignment
