"""
Table catalog: the physical tables the engine can hand out, and their
admin CRUD.
"""

import logging

from sqlalchemy import select, update

from ..errors import ConflictError, NotFoundError
from ..extensions import db
from ..models import (
    ACTIVE_STATUSES, DiningTable, Location, Reservation, ReservationAssignment, TableStatus,
)
from ..schemas import CreateTableRequest, UpdateTableRequest

logger = logging.getLogger(__name__)


def list_tables(location: str | None = None) -> list[DiningTable]:
    """Bookable tables in catalog order, optionally restricted to one location."""
    q = select(DiningTable).where(DiningTable.status != TableStatus.BLOCKED.value)
    if location:
        q = q.where(DiningTable.location == Location(location).value)
    return list(db.session.execute(q.order_by(DiningTable.id)).scalars())


def all_tables() -> list[DiningTable]:
    return list(db.session.execute(select(DiningTable).order_by(DiningTable.id)).scalars())


def get_table(table_id: int) -> DiningTable:
    table = db.session.get(DiningTable, table_id)
    if table is None:
        raise NotFoundError("Table not found.")
    return table


def table_in_use(table_id: int) -> bool:
    """True while a confirmed or pending-payment reservation holds the table."""
    q = (
        select(ReservationAssignment.id)
        .join(Reservation, ReservationAssignment.reservation_id == Reservation.id)
        .where(ReservationAssignment.table_id == table_id, Reservation.status.in_(ACTIVE_STATUSES))
        .limit(1)
    )
    return db.session.execute(q).first() is not None


def add_table(data: CreateTableRequest) -> DiningTable:
    table = DiningTable(
        name=data.name,
        capacity=data.capacity,
        location=data.location.value,
        type=data.type,
        status=data.status.value,
        is_joinable=data.is_joinable,
    )
    db.session.add(table)
    db.session.commit()
    logger.info("Added table %s (%s seats, %s)", table.id, table.capacity, table.location)
    return table


def update_table(table_id: int, data: UpdateTableRequest) -> DiningTable:
    table = get_table(table_id)
    for key, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        setattr(table, key, value.value if isinstance(value, (Location, TableStatus)) else value)
    db.session.commit()
    return table


def delete_table(table_id: int) -> None:
    table = get_table(table_id)
    if table_in_use(table_id):
        raise ConflictError(
            "Cannot delete table with active reservations. Please cancel or move them first.",
            code="TABLE_IN_USE",
        )

    db.session.execute(
        ReservationAssignment.__table__.delete().where(ReservationAssignment.table_id == table_id)
    )
    db.session.execute(
        update(Reservation).where(Reservation.table_id == table_id).values(table_id=None)
    )
    db.session.delete(table)
    db.session.commit()
    logger.info("Deleted table %s", table_id)
