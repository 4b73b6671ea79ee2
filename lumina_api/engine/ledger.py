"""
Reservation ledger: reservations and the tables assigned to them.

Everything here works on the request's session, so reads and writes made
between ``lock_slot`` and the commit share one transaction.
"""

import zlib
from collections import defaultdict
from datetime import date

from sqlalchemy import func, select, text

from ..errors import NotFoundError
from ..extensions import db
from ..models import Reservation, ReservationAssignment, ReservationStatus


def lock_slot(on: date, time_slot: str) -> None:
    """
    Serialises assignment for one (date, slot) until the transaction ends.

    PostgreSQL gets a transaction-scoped advisory lock. Other backends rely
    on their own write serialisation plus the unique assignment index.
    """
    if db.engine.dialect.name != "postgresql":
        return
    key = zlib.crc32(f"{on.isoformat()}|{time_slot}".encode())
    db.session.execute(text("SELECT pg_advisory_xact_lock(:key)"), {"key": key})


def _held(on: date):
    return (
        select(ReservationAssignment.time_slot, ReservationAssignment.table_id)
        .join(Reservation, ReservationAssignment.reservation_id == Reservation.id)
        .where(
            ReservationAssignment.date == on,
            Reservation.status != ReservationStatus.CANCELLED.value,
        )
    )


def assigned_table_ids(on: date, time_slot: str) -> set[int]:
    """Tables held by non-cancelled reservations at exactly this slot."""
    rows = db.session.execute(_held(on).where(ReservationAssignment.time_slot == time_slot))
    return {table_id for _, table_id in rows}


def assigned_table_ids_by_slot(on: date) -> dict[str, set[int]]:
    taken = defaultdict(set)
    for time_slot, table_id in db.session.execute(_held(on)):
        taken[time_slot].add(table_id)
    return taken


def get_reservation(reservation_id: int) -> Reservation:
    reservation = db.session.get(Reservation, reservation_id)
    if reservation is None:
        raise NotFoundError("Reservation not found.")
    return reservation


def list_reservations(on: date | None = None, page: int = 1, page_size: int = 20):
    """Returns ``(total, reservations)`` for one page, ordered by date then slot."""
    q = select(Reservation)
    if on is not None:
        q = q.where(Reservation.date == on)

    total = db.session.execute(select(func.count()).select_from(q.subquery())).scalar_one()
    rows = db.session.execute(
        q.order_by(Reservation.date.asc(), Reservation.time_slot.asc(), Reservation.id.asc())
        .limit(page_size)
        .offset((page - 1) * page_size)
    ).scalars()
    return total, list(rows)


def insert_reservation(**fields) -> Reservation:
    reservation = Reservation(**fields)
    db.session.add(reservation)
    db.session.flush()
    return reservation


def insert_assignments(reservation: Reservation, table_ids: list[int]) -> None:
    for table_id in table_ids:
        reservation.assignments.append(
            ReservationAssignment(
                table_id=table_id,
                date=reservation.date,
                time_slot=reservation.time_slot,
                released=reservation.is_cancelled,
            )
        )
    reservation.table_id = table_ids[0] if table_ids else None
    db.session.flush()


def clear_assignments(reservation: Reservation) -> None:
    reservation.assignments.clear()
    db.session.flush()


def sync_assignments(reservation: Reservation) -> None:
    """Copies the reservation's slot and cancelled state onto its assignment rows."""
    for assignment in reservation.assignments:
        assignment.date = reservation.date
        assignment.time_slot = reservation.time_slot
        assignment.released = reservation.is_cancelled
    db.session.flush()
