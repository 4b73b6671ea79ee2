from datetime import date

import pytest

from lumina_api.app import create_app
from lumina_api.blueprints import reservations as reservations_bp
from lumina_api.config import TestConfig
from lumina_api.extensions import db as _db
from lumina_api.models import DiningTable
from lumina_api.schemas import CreateReservationRequest
from lumina_api.settings_store import put_settings

ADMIN_HEADERS = {"Authorization": f"Bearer {TestConfig.ADMIN_TOKEN}"}
DAY = date(2030, 5, 17)


@pytest.fixture
def app():
    app = create_app(TestConfig)
    reservations_bp._rate_state.clear()
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def make_table(db):
    counter = {"n": 0}

    def _make(capacity, *, name=None, location="Indoor", joinable=False, status="Available", type="Standard"):
        counter["n"] += 1
        table = DiningTable(
            name=name or f"T{counter['n']}",
            capacity=capacity,
            location=location,
            type=type,
            status=status,
            is_joinable=joinable,
        )
        db.session.add(table)
        db.session.commit()
        return table

    return _make


@pytest.fixture
def set_settings(db):
    def _set(**values):
        put_settings(values)
        db.session.commit()

    return _set


@pytest.fixture
def booking_request():
    def _request(guest_count=2, *, time_slot="19:00", on=DAY, email="guest@example.com", **extra):
        return CreateReservationRequest(
            customer_name="Test Guest",
            customer_email=email,
            customer_phone="0812-555-0000",
            date=on,
            time_slot=time_slot,
            guest_count=guest_count,
            **extra,
        )

    return _request


def reservation_payload(guest_count=2, **overrides):
    payload = {
        "customer_name": "Integration Tester",
        "customer_email": "tester@example.com",
        "customer_phone": "0812-555-1234",
        "date": DAY.isoformat(),
        "time_slot": "19:00",
        "guest_count": guest_count,
    }
    payload.update(overrides)
    return payload
