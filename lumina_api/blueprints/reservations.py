from flask import Blueprint, request, jsonify, current_app
from datetime import datetime, timezone
from pydantic import ValidationError
from .. import booking
from ..auth import admin_required
from ..engine.availability import availability
from ..engine import ledger
from ..http import jerror, load_body, schema_errors
from ..schemas import (
    AvailabilityQuery, CreateReservationRequest, DepositUpdateRequest,
    StatusUpdateRequest, UpdateReservationRequest,
)
from ..utils.time import api_iso_z, parse_date

bp = Blueprint("reservations", __name__)

_rate_state: dict[str, tuple[int, int]] = {}
_RATE_WINDOW = 60
_swept_window = -1


def _evict_stale(window: int) -> None:
    global _swept_window
    if window == _swept_window:
        return
    for ip in [ip for ip, (_, win) in _rate_state.items() if win < window]:
        del _rate_state[ip]
    _swept_window = window


def _allow(ip: str) -> bool:
    now = int(datetime.now(tz=timezone.utc).timestamp())
    window = now // _RATE_WINDOW
    _evict_stale(window)
    count, win = _rate_state.get(ip, (0, window))
    if win != window:
        count, win = 0, window
    count += 1
    _rate_state[ip] = (count, win)
    return count <= current_app.config["RATE_LIMIT_PER_MINUTE"]


def _client_ip() -> str:
    fwd = request.headers.get("X-Forwarded-For")
    return (fwd.split(",")[0].strip() if fwd else request.remote_addr or "0.0.0.0")


def reservation_json(reservation):
    tables = [a.table for a in reservation.assignments if a.table is not None]
    primary = reservation.primary_table
    return {
        "id": reservation.id,
        "table_id": reservation.table_id,
        "table_name": primary.name if primary else None,
        "location": primary.location if primary else None,
        "customer_name": reservation.customer_name,
        "customer_email": reservation.customer_email,
        "customer_phone": reservation.customer_phone,
        "date": reservation.date.isoformat(),
        "time_slot": reservation.time_slot,
        "guest_count": reservation.guest_count,
        "special_requests": reservation.special_requests,
        "seating_preference": reservation.seating_preference,
        "status": reservation.status,
        "deposit_required": reservation.deposit_required,
        "deposit_paid": reservation.deposit_paid,
        "created_at": api_iso_z(reservation.created_at) if reservation.created_at else None,
        "assigned_tables": [{"id": t.id, "name": t.name, "capacity": t.capacity} for t in tables],
        "table_names": " + ".join(t.name for t in tables),
    }


@bp.get("/availability")
def check_availability():
    if not request.args.get("date") or not request.args.get("guests"):
        return jerror(400, "MISSING_PARAMS", "Date and guest count are required.")
    try:
        query = AvailabilityQuery.model_validate(request.args.to_dict())
    except ValidationError as e:
        return jerror(422, "VALIDATION_ERROR", "Invalid input.", details=schema_errors(e))

    location = query.location.value if query.location else None
    slots = availability(query.date, query.guests, location)
    return jsonify(slots=[s.to_dict() for s in slots])


@bp.post("/reservations")
def create_reservation():
    ip = _client_ip()
    if not _allow(ip):
        return jerror(429, "RATE_LIMITED", "Too many requests. Try again shortly.")

    data = load_body(CreateReservationRequest)
    result = booking.create_reservation(data)
    return jsonify(result.to_dict()), 201


@bp.get("/reservations/<int:reservation_id>")
def get_reservation(reservation_id: int):
    return jsonify(reservation_json(ledger.get_reservation(reservation_id)))


@bp.get("/admin/reservations")
@admin_required
def list_reservations():
    """
    Admin list, optionally for a single day, with pagination.
    Query: ?date=YYYY-MM-DD&page=1&page_size=20
    """
    day = None
    date_str = request.args.get("date")
    if date_str:
        try:
            day = parse_date(date_str)
        except ValueError as e:
            return jerror(422, "BAD_DATE", "Invalid date format. Use YYYY-MM-DD.", str(e))

    try:
        page = max(int(request.args.get("page", 1)), 1)
        page_size = min(max(int(request.args.get("page_size", 20)), 1), 100)
    except ValueError:
        return jerror(422, "BAD_PAGE", "page and page_size must be integers.")

    total, rows = ledger.list_reservations(day, page, page_size)
    return jsonify(
        page=page,
        pageSize=page_size,
        total=total,
        reservations=[reservation_json(r) for r in rows],
    )


@bp.post("/admin/reservations")
@admin_required
def admin_create_reservation():
    data = load_body(CreateReservationRequest)
    result = booking.create_reservation(data)
    return jsonify(result.to_dict()), 201


@bp.patch("/admin/reservations/status/<int:reservation_id>")
@admin_required
def update_status(reservation_id: int):
    data = load_body(StatusUpdateRequest)
    booking.set_status(reservation_id, data.status)
    return jsonify(message="Reservation status updated")


@bp.patch("/admin/reservations/deposit/<int:reservation_id>")
@admin_required
def update_deposit(reservation_id: int):
    data = load_body(DepositUpdateRequest)
    booking.set_deposit_paid(reservation_id, data.deposit_paid)
    return jsonify(message="Deposit status updated successfully")


@bp.patch("/admin/reservations/<int:reservation_id>")
@admin_required
def update_reservation(reservation_id: int):
    data = load_body(UpdateReservationRequest)
    reservation = booking.update_reservation(reservation_id, data)
    return jsonify(message="Reservation updated successfully", reservation=reservation_json(reservation))


@bp.delete("/admin/reservations/<int:reservation_id>")
@admin_required
def delete_reservation(reservation_id: int):
    booking.delete_reservation(reservation_id)
    return jsonify(message="Reservation deleted successfully")
