import random
from collections import Counter

import pytest
from sqlalchemy import func, select

from conftest import DAY
from lumina_api import booking
from lumina_api.engine import ledger
from lumina_api.engine.assignment import find_assignment
from lumina_api.errors import CapacityError, ConflictError, SlotConflictError, ValidationError
from lumina_api.models import Reservation, ReservationAssignment, ReservationStatus
from lumina_api.schemas import UpdateReservationRequest


def _count(db, model):
    return db.session.execute(select(func.count()).select_from(model)).scalar_one()


def test_joins_joinable_tables_once_fixed_tables_are_booked(db, make_table, booking_request):
    small = make_table(2)
    mid_a = make_table(4)
    mid_b = make_table(4)
    booked = [booking.create_reservation(booking_request(n)) for n in (2, 4, 4)]
    assert [b.assigned_tables for b in booked] == [[small.id], [mid_a.id], [mid_b.id]]

    join_a = make_table(4, joinable=True)
    join_b = make_table(4, joinable=True)
    result = booking.create_reservation(booking_request(6))

    assert result.assigned_tables == [join_a.id, join_b.id]
    reservation = ledger.get_reservation(result.reservation_id)
    assert reservation.table_id == join_a.id
    assert [a.table_id for a in reservation.assignments] == [join_a.id, join_b.id]


def test_party_at_threshold_needs_deposit(db, make_table, set_settings, booking_request):
    make_table(6)
    set_settings(deposit_config={"threshold": 5, "amount": 75000})

    result = booking.create_reservation(booking_request(5))

    assert result.requires_deposit
    assert result.deposit_amount == 75000
    reservation = ledger.get_reservation(result.reservation_id)
    assert reservation.status == ReservationStatus.PENDING_PAYMENT.value
    assert reservation.deposit_required is True
    assert reservation.deposit_paid is False


def test_small_party_is_confirmed_without_deposit(db, make_table, booking_request):
    make_table(4)
    result = booking.create_reservation(booking_request(4))

    assert not result.requires_deposit
    assert result.deposit_amount == 0
    assert ledger.get_reservation(result.reservation_id).status == ReservationStatus.CONFIRMED.value


def test_full_slot_raises_capacity_error_and_writes_nothing(db, make_table, booking_request):
    make_table(4, status="Blocked")
    make_table(2)
    booking.create_reservation(booking_request(2))
    before = (_count(db, Reservation), _count(db, ReservationAssignment))

    with pytest.raises(CapacityError):
        booking.create_reservation(booking_request(2, email="late@example.com"))

    assert (_count(db, Reservation), _count(db, ReservationAssignment)) == before


def test_blocked_tables_are_never_assigned(db, make_table, booking_request):
    make_table(4, status="Blocked", joinable=True)
    open_table = make_table(8)
    assert booking.create_reservation(booking_request(3)).assigned_tables == [open_table.id]


def test_seating_preference_limits_location(db, make_table, booking_request):
    make_table(2, location="Indoor")
    patio = make_table(4, location="Outdoor")
    result = booking.create_reservation(booking_request(2, seating_preference="Outdoor"))
    assert result.assigned_tables == [patio.id]
    assert ledger.get_reservation(result.reservation_id).seating_preference == "Outdoor"


def test_slot_must_be_configured(db, make_table, set_settings, booking_request):
    make_table(4)
    set_settings(restaurant_hours={"open": "18:00", "close": "21:00", "interval": 60})
    with pytest.raises(ValidationError) as exc:
        booking.create_reservation(booking_request(2, time_slot="18:30"))
    assert exc.value.code == "BAD_SLOT"


def test_other_slots_do_not_share_bookings(db, make_table, booking_request):
    table = make_table(4)
    booking.create_reservation(booking_request(4, time_slot="19:00"))
    assert booking.create_reservation(booking_request(4, time_slot="19:30")).assigned_tables == [table.id]


def test_cancelling_frees_tables(db, make_table, booking_request):
    table = make_table(4)
    first = booking.create_reservation(booking_request(4))
    booking.set_status(first.reservation_id, ReservationStatus.CANCELLED)

    second = booking.create_reservation(booking_request(3, email="next@example.com"))
    assert second.assigned_tables == [table.id]


def test_completed_reservations_keep_their_tables(db, make_table, booking_request):
    make_table(4)
    first = booking.create_reservation(booking_request(4))
    booking.set_status(first.reservation_id, ReservationStatus.COMPLETED)

    assert find_assignment(2, DAY, "19:00") is None


def test_uncancel_fails_when_tables_were_rebooked(db, make_table, booking_request):
    make_table(4)
    first = booking.create_reservation(booking_request(4))
    booking.set_status(first.reservation_id, ReservationStatus.CANCELLED)
    booking.create_reservation(booking_request(2, email="other@example.com"))

    with pytest.raises(ConflictError) as exc:
        booking.set_status(first.reservation_id, ReservationStatus.CONFIRMED)

    assert exc.value.code == "TABLE_TAKEN"
    assert ledger.get_reservation(first.reservation_id).status == ReservationStatus.CANCELLED.value


def test_uncancel_reclaims_free_tables(db, make_table, booking_request):
    table = make_table(4)
    first = booking.create_reservation(booking_request(4))
    booking.set_status(first.reservation_id, ReservationStatus.CANCELLED)
    booking.set_status(first.reservation_id, ReservationStatus.CONFIRMED)

    assert ledger.assigned_table_ids(DAY, "19:00") == {table.id}


def test_growing_party_is_moved_to_a_bigger_table(db, make_table, booking_request):
    small = make_table(2)
    big = make_table(6)
    result = booking.create_reservation(booking_request(2))
    assert result.assigned_tables == [small.id]

    reservation = booking.update_reservation(result.reservation_id, UpdateReservationRequest(guest_count=5))

    assert reservation.table_id == big.id
    assert ledger.assigned_table_ids(DAY, "19:00") == {big.id}


def test_moving_slot_keeps_own_table_when_it_is_free(db, make_table, booking_request):
    table = make_table(4)
    result = booking.create_reservation(booking_request(4))

    booking.update_reservation(result.reservation_id, UpdateReservationRequest(time_slot="20:00"))

    assert ledger.assigned_table_ids(DAY, "19:00") == set()
    assert ledger.assigned_table_ids(DAY, "20:00") == {table.id}


def test_infeasible_update_leaves_reservation_untouched(db, make_table, booking_request):
    table = make_table(4)
    result = booking.create_reservation(booking_request(4))

    with pytest.raises(CapacityError):
        booking.update_reservation(result.reservation_id, UpdateReservationRequest(guest_count=9))

    reservation = ledger.get_reservation(result.reservation_id)
    assert reservation.guest_count == 4
    assert ledger.assigned_table_ids(DAY, "19:00") == {table.id}


def test_plain_field_update_keeps_tables(db, make_table, booking_request):
    table = make_table(4)
    result = booking.create_reservation(booking_request(4))

    reservation = booking.update_reservation(
        result.reservation_id, UpdateReservationRequest(special_requests="Window seat", customer_name="Renamed"),
    )

    assert reservation.customer_name == "Renamed"
    assert reservation.special_requests == "Window seat"
    assert ledger.assigned_table_ids(DAY, "19:00") == {table.id}


def test_stale_read_loses_to_unique_index(db, make_table, booking_request, monkeypatch):
    table = make_table(4)
    booking.create_reservation(booking_request(4))
    before = _count(db, Reservation)

    # Simulates a concurrent request that read the ledger before the first commit.
    monkeypatch.setattr(ledger, "assigned_table_ids", lambda on, time_slot: set())
    with pytest.raises(SlotConflictError):
        booking.create_reservation(booking_request(4, email="racer@example.com"))

    assert _count(db, Reservation) == before
    monkeypatch.undo()
    assert ledger.assigned_table_ids(DAY, "19:00") == {table.id}


def test_no_table_is_held_twice_in_a_slot(db, make_table, booking_request):
    for capacity, joinable in [(2, False), (2, True), (4, True), (4, True), (6, False), (8, False)]:
        make_table(capacity, joinable=joinable)

    rng = random.Random(7)
    for i in range(40):
        request = booking_request(
            rng.randint(1, 10), time_slot=rng.choice(["18:00", "19:00"]), email=f"g{i}@example.com",
        )
        try:
            result = booking.create_reservation(request)
        except CapacityError:
            continue
        if rng.random() < 0.25:
            booking.set_status(result.reservation_id, ReservationStatus.CANCELLED)

    rows = db.session.execute(
        select(ReservationAssignment.table_id, ReservationAssignment.time_slot)
        .join(Reservation)
        .where(Reservation.status != ReservationStatus.CANCELLED.value)
    ).all()
    assert rows
    assert max(Counter(rows).values()) == 1


def test_delete_removes_assignments(db, make_table, booking_request):
    make_table(4)
    result = booking.create_reservation(booking_request(4))
    booking.delete_reservation(result.reservation_id)

    assert _count(db, ReservationAssignment) == 0
    assert find_assignment(4, DAY, "19:00") is not None


def test_uncancel_reseats_a_party_that_grew_while_cancelled(db, make_table, booking_request):
    small = make_table(2)
    big = make_table(8)
    result = booking.create_reservation(booking_request(2))
    assert result.assigned_tables == [small.id]
    booking.set_status(result.reservation_id, ReservationStatus.CANCELLED)
    booking.update_reservation(result.reservation_id, UpdateReservationRequest(guest_count=8))

    reservation = booking.set_status(result.reservation_id, ReservationStatus.CONFIRMED)

    assert sum(a.table.capacity for a in reservation.assignments) >= 8
    assert ledger.assigned_table_ids(DAY, "19:00") == {big.id}


def test_uncancel_fails_when_grown_party_no_longer_fits(db, make_table, booking_request):
    make_table(2)
    result = booking.create_reservation(booking_request(2))
    booking.set_status(result.reservation_id, ReservationStatus.CANCELLED)
    booking.update_reservation(result.reservation_id, UpdateReservationRequest(guest_count=8))

    with pytest.raises(ConflictError) as exc:
        booking.set_status(result.reservation_id, ReservationStatus.CONFIRMED)

    assert exc.value.code == "TABLE_TAKEN"
    assert ledger.get_reservation(result.reservation_id).status == ReservationStatus.CANCELLED.value
    assert ledger.assigned_table_ids(DAY, "19:00") == set()


def test_uncancel_never_reclaims_a_blocked_table(db, make_table, booking_request):
    table = make_table(4)
    result = booking.create_reservation(booking_request(4))
    booking.set_status(result.reservation_id, ReservationStatus.CANCELLED)
    table.status = "Blocked"
    db.session.commit()

    with pytest.raises(ConflictError):
        booking.set_status(result.reservation_id, ReservationStatus.CONFIRMED)

    assert ledger.assigned_table_ids(DAY, "19:00") == set()


def test_uncancel_moves_off_a_blocked_table_when_another_fits(db, make_table, booking_request):
    table = make_table(4)
    spare = make_table(6)
    result = booking.create_reservation(booking_request(4))
    booking.set_status(result.reservation_id, ReservationStatus.CANCELLED)
    table.status = "Blocked"
    db.session.commit()

    reservation = booking.update_reservation(
        result.reservation_id, UpdateReservationRequest(status=ReservationStatus.CONFIRMED),
    )

    assert reservation.table_id == spare.id
    assert ledger.assigned_table_ids(DAY, "19:00") == {spare.id}


def test_null_status_in_update_is_ignored(db, make_table, booking_request):
    table = make_table(4)
    result = booking.create_reservation(booking_request(4))

    reservation = booking.update_reservation(
        result.reservation_id, UpdateReservationRequest.model_validate({"status": None, "customer_name": "Kept"}),
    )

    assert reservation.status == ReservationStatus.CONFIRMED.value
    assert reservation.customer_name == "Kept"
    assert ledger.assigned_table_ids(DAY, "19:00") == {table.id}
