import logging
import random
from datetime import timedelta
import click
from flask import Flask, jsonify
from flask.cli import with_appcontext
from flask_cors import CORS
from .extensions import db, migrate
from .config import Config
from .http import register_error_handlers
from .blueprints.auth import bp as auth_bp
from .blueprints.menu import bp as menu_bp
from .blueprints.reservations import bp as reservations_bp
from .blueprints.settings import bp as settings_bp
from .blueprints.tables import bp as tables_bp
from .models import DiningTable, MenuItem, Reservation, ReservationAssignment, Setting
from .utils.time import api_iso_z, utc_now

SEED_TABLES = [
    ("T1", 2, "Indoor", "Standard", False),
    ("T2", 2, "Indoor", "Standard", True),
    ("T3", 4, "Indoor", "Standard", True),
    ("T4", 4, "Indoor", "Booth", True),
    ("T5", 6, "Indoor", "Booth", False),
    ("V1", 8, "Indoor", "VIP", False),
    ("P1", 2, "Outdoor", "Standard", True),
    ("P2", 4, "Outdoor", "Standard", True),
    ("P3", 4, "Outdoor", "Standard", True),
]

SEED_MENU = [
    ("Grilled Salmon", "Lemon butter sauce, seasonal greens.", 185000, "Main"),
    ("Ribeye Steak", "250g, peppercorn sauce, fries.", 245000, "Main"),
    ("Truffle Risotto", "Arborio rice, parmesan, black truffle.", 165000, "Main"),
    ("Caesar Salad", "Romaine, anchovy dressing, croutons.", 85000, "Starter"),
    ("Tiramisu", "Espresso-soaked ladyfingers, mascarpone.", 70000, "Dessert"),
]


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(level=app.config["LOG_LEVEL"])

    CORS(app)

    db.init_app(app)
    migrate.init_app(app, db)

    register_error_handlers(app)

    app.register_blueprint(reservations_bp, url_prefix="/api")
    app.register_blueprint(settings_bp, url_prefix="/api")
    app.register_blueprint(menu_bp, url_prefix="/api")
    app.register_blueprint(tables_bp, url_prefix="/api/admin/tables")
    app.register_blueprint(auth_bp, url_prefix="/api/auth")

    @app.get("/api/health")
    def health():
        return jsonify(status="ok", timestamp=api_iso_z(utc_now()))

    @click.command("init-db")
    @with_appcontext
    def init_db_command():
        """Creates all tables without running migrations."""
        db.create_all()
        print("Database initialized.")

    @click.command("seed")
    @with_appcontext
    def seed_command():
        """Creates sample data for the database."""
        from . import booking
        from .errors import CapacityError
        from .schemas import CreateReservationRequest
        from .settings_store import put_settings

        db.session.query(ReservationAssignment).delete()
        db.session.query(Reservation).delete()
        db.session.query(DiningTable).delete()
        db.session.query(MenuItem).delete()
        db.session.query(Setting).delete()
        db.session.commit()
        print("Cleared existing data.")

        put_settings({
            "restaurant_hours": {"open": "12:00", "close": "22:00", "interval": 30},
            "deposit_config": {"threshold": 5, "amount": 50000},
        })
        db.session.add_all(
            DiningTable(name=name, capacity=cap, location=loc, type=kind, is_joinable=joinable)
            for name, cap, loc, kind, joinable in SEED_TABLES
        )
        db.session.add_all(
            MenuItem(name=name, description=desc, price=price, category=cat)
            for name, desc, price, cat in SEED_MENU
        )
        db.session.commit()
        print(f"Created {len(SEED_TABLES)} tables and {len(SEED_MENU)} menu items.")

        created = 0
        today = utc_now().date()
        for i in range(35):
            request = CreateReservationRequest(
                customer_name=f"Customer {i+1}",
                customer_email=f"customer{i+1}@example.com",
                customer_phone=f"0812-555-{i:04d}",
                date=today + timedelta(days=random.randint(0, 2)),
                time_slot=random.choice(["18:00", "18:30", "19:00", "19:30", "20:00"]),
                guest_count=random.randint(1, 8),
                seating_preference=random.choice([None, "Indoor", "Outdoor"]),
            )
            try:
                booking.create_reservation(request)
            except CapacityError:
                continue
            created += 1

        print(f"Created {created} reservations.")
        print("Database seeded!")

    app.cli.add_command(init_db_command)
    app.cli.add_command(seed_command)

    return app
