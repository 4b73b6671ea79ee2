"""
Reservation commands: creation and admin changes that touch table
assignments.

Each command runs its engine read, its decision and its writes in one
transaction, holding the (date, slot) lock from ``ledger.lock_slot``. The
partial unique index on assignments backs this up at commit time; losing
that race is reported as a retryable conflict.
"""

import enum
import logging
from contextlib import contextmanager
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from . import notifications
from .engine import ledger
from .engine.assignment import find_assignment
from .engine.slots import configured_slots
from .errors import ApiError, CapacityError, ConflictError, SlotConflictError, StorageError, ValidationError
from .extensions import db
from .models import Reservation, ReservationStatus
from .schemas import CreateReservationRequest, UpdateReservationRequest
from .settings_store import load_deposit_config

logger = logging.getLogger(__name__)

# Fields whose change means the party needs tables picked again.
_REBOOK_FIELDS = ("date", "time_slot", "guest_count", "seating_preference")


@dataclass(frozen=True)
class BookingResult:
    reservation_id: int
    assigned_tables: list[int]
    requires_deposit: bool
    deposit_amount: int

    def to_dict(self):
        return {
            "id": self.reservation_id,
            "message": "Reservation created successfully",
            "assignedTables": self.assigned_tables,
            "requiresDeposit": self.requires_deposit,
            "depositAmount": self.deposit_amount,
        }


def _plain(value):
    return value.value if isinstance(value, enum.Enum) else value


@contextmanager
def _writing(conflict: ApiError):
    """Commits on success; rolls back and raises ``conflict`` on a uniqueness violation."""
    try:
        yield
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.info("Commit lost to a concurrent booking: %s", conflict.message)
        raise conflict from e
    except ApiError:
        db.session.rollback()
        raise
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Failed to write reservation")
        raise StorageError("Could not save the reservation.") from e


def _check_slot(time_slot: str) -> None:
    if time_slot not in configured_slots():
        raise ValidationError(f"{time_slot} is not a bookable time slot.", code="BAD_SLOT")


def create_reservation(data: CreateReservationRequest) -> BookingResult:
    _check_slot(data.time_slot)
    deposit = load_deposit_config()
    requires_deposit = deposit.requires_deposit(data.guest_count)
    location = _plain(data.seating_preference)

    with _writing(SlotConflictError("Just booked out. Pick another time.")):
        ledger.lock_slot(data.date, data.time_slot)
        assignment = find_assignment(data.guest_count, data.date, data.time_slot, location)
        if assignment is None:
            raise CapacityError("Not enough capacity for that time slot.")

        reservation = ledger.insert_reservation(
            customer_name=data.customer_name,
            customer_email=data.customer_email.lower(),
            customer_phone=data.customer_phone,
            date=data.date,
            time_slot=data.time_slot,
            guest_count=data.guest_count,
            special_requests=data.special_requests or "",
            seating_preference=location,
            status=(ReservationStatus.PENDING_PAYMENT if requires_deposit else ReservationStatus.CONFIRMED).value,
            deposit_required=requires_deposit,
            deposit_paid=False,
        )
        ledger.insert_assignments(reservation, assignment.table_ids)

    notifications.send_booking_confirmation(reservation, assignment.table_ids)
    return BookingResult(
        reservation_id=reservation.id,
        assigned_tables=assignment.table_ids,
        requires_deposit=requires_deposit,
        deposit_amount=deposit.amount if requires_deposit else 0,
    )


def _tables_taken():
    return ConflictError("Its tables are no longer free for that slot.", code="TABLE_TAKEN")


def _reassign(reservation: Reservation, reclaiming: bool = False) -> None:
    """
    Picks tables afresh for the reservation's current slot and party.

    ``reclaiming`` marks a reservation coming back from Cancelled; running
    out of room is then reported as its tables being taken.
    """
    ledger.lock_slot(reservation.date, reservation.time_slot)
    # Its own tables count as free for the new pick.
    ledger.clear_assignments(reservation)
    assignment = find_assignment(
        reservation.guest_count, reservation.date, reservation.time_slot, reservation.seating_preference,
    )
    if assignment is None:
        if reclaiming:
            raise _tables_taken()
        raise CapacityError("Not enough capacity for that time slot.")
    ledger.insert_assignments(reservation, assignment.table_ids)


def _place(reservation: Reservation, was_cancelled: bool, rebook: bool) -> None:
    if reservation.is_cancelled:
        ledger.sync_assignments(reservation)
    elif was_cancelled:
        _reassign(reservation, reclaiming=True)
    elif rebook:
        _reassign(reservation)
    else:
        ledger.sync_assignments(reservation)


def update_reservation(reservation_id: int, data: UpdateReservationRequest) -> Reservation:
    reservation = ledger.get_reservation(reservation_id)
    changes = {k: _plain(v) for k, v in data.model_dump(exclude_unset=True).items()}
    for required in (
        "customer_name", "customer_email", "customer_phone", "date", "time_slot", "guest_count", "status",
    ):
        if changes.get(required, "") is None:
            del changes[required]
    if "customer_email" in changes:
        changes["customer_email"] = changes["customer_email"].lower()
    if "special_requests" in changes:
        changes["special_requests"] = changes["special_requests"] or ""
    if "time_slot" in changes:
        _check_slot(changes["time_slot"])

    rebook = any(k in changes and changes[k] != getattr(reservation, k) for k in _REBOOK_FIELDS)
    was_cancelled = reservation.is_cancelled

    with _writing(_tables_taken()):
        for key, value in changes.items():
            setattr(reservation, key, value)
        _place(reservation, was_cancelled, rebook)

    logger.info("Updated reservation %s%s", reservation.id, " (tables reassigned)" if rebook else "")
    return reservation


def set_status(reservation_id: int, status: ReservationStatus) -> Reservation:
    """
    Any status may be set. Cancelling frees the tables; leaving Cancelled
    runs the table pick again for the party as it stands now, and fails
    when nothing bookable seats it.
    """
    reservation = ledger.get_reservation(reservation_id)
    was_cancelled = reservation.is_cancelled
    with _writing(_tables_taken()):
        reservation.status = _plain(status)
        _place(reservation, was_cancelled, rebook=False)
    notifications.send_status_change(reservation)
    return reservation


def set_deposit_paid(reservation_id: int, paid: bool) -> Reservation:
    reservation = ledger.get_reservation(reservation_id)
    reservation.deposit_paid = paid
    db.session.commit()
    return reservation


def delete_reservation(reservation_id: int) -> None:
    reservation = ledger.get_reservation(reservation_id)
    db.session.delete(reservation)
    db.session.commit()
    logger.info("Deleted reservation %s", reservation_id)
