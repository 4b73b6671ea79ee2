
import enum
from sqlalchemy import Index, func, text
from .extensions import db


class Location(str, enum.Enum):
    INDOOR = "Indoor"
    OUTDOOR = "Outdoor"


class TableStatus(str, enum.Enum):
    AVAILABLE = "Available"
    BLOCKED = "Blocked"


class ReservationStatus(str, enum.Enum):
    PENDING_PAYMENT = "Pending Payment"
    CONFIRMED = "Confirmed"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


# Statuses that stop a table from being deleted.
ACTIVE_STATUSES = (ReservationStatus.CONFIRMED.value, ReservationStatus.PENDING_PAYMENT.value)


class DiningTable(db.Model):
    __tablename__ = "tables"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(60), nullable=False)
    capacity = db.Column(db.Integer, nullable=False)
    location = db.Column(db.String(16), nullable=False, default=Location.INDOOR.value)
    type = db.Column(db.String(40), nullable=False, default="Standard")
    status = db.Column(db.String(16), nullable=False, default=TableStatus.AVAILABLE.value, index=True)
    is_joinable = db.Column(db.Boolean, nullable=False, default=True)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "capacity": self.capacity,
            "location": self.location,
            "type": self.type,
            "status": self.status,
            "is_joinable": self.is_joinable,
        }


class Reservation(db.Model):
    __tablename__ = "reservations"
    id = db.Column(db.Integer, primary_key=True)
    # First assigned table, kept for display next to the full assignment list.
    table_id = db.Column(db.Integer, db.ForeignKey("tables.id", ondelete="SET NULL"), nullable=True)
    customer_name = db.Column(db.String(120), nullable=False)
    customer_email = db.Column(db.String(255), nullable=False, index=True)
    customer_phone = db.Column(db.String(32), nullable=False)
    date = db.Column(db.Date, nullable=False, index=True)
    time_slot = db.Column(db.String(5), nullable=False)
    guest_count = db.Column(db.Integer, nullable=False)
    special_requests = db.Column(db.Text, nullable=False, default="")
    seating_preference = db.Column(db.String(16), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=ReservationStatus.CONFIRMED.value)
    deposit_required = db.Column(db.Boolean, nullable=False, default=False)
    deposit_paid = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, server_default=func.now())

    primary_table = db.relationship("DiningTable")
    assignments = db.relationship(
        "ReservationAssignment",
        back_populates="reservation",
        cascade="all, delete-orphan",
        order_by="ReservationAssignment.id",
    )

    @property
    def is_cancelled(self) -> bool:
        return self.status == ReservationStatus.CANCELLED.value


class ReservationAssignment(db.Model):
    """One table held by one reservation at the reservation's date and slot.

    ``date`` and ``time_slot`` are copied from the reservation so the partial
    unique index can keep a table from being held twice in the same slot.
    Rows of cancelled reservations are flagged ``released`` and drop out of
    the index.
    """
    __tablename__ = "reservation_assignments"
    id = db.Column(db.Integer, primary_key=True)
    reservation_id = db.Column(db.Integer, db.ForeignKey("reservations.id", ondelete="CASCADE"), nullable=False, index=True)
    table_id = db.Column(db.Integer, db.ForeignKey("tables.id", ondelete="CASCADE"), nullable=False)
    date = db.Column(db.Date, nullable=False)
    time_slot = db.Column(db.String(5), nullable=False)
    released = db.Column(db.Boolean, nullable=False, default=False)

    reservation = db.relationship("Reservation", back_populates="assignments")
    table = db.relationship("DiningTable")

    __table_args__ = (
        Index(
            "uq_assignment_table_slot",
            "table_id", "date", "time_slot",
            unique=True,
            sqlite_where=text("NOT released"),
            postgresql_where=text("NOT released"),
        ),
        Index("ix_assignment_date_slot", "date", "time_slot"),
    )


class Setting(db.Model):
    __tablename__ = "settings"
    key = db.Column(db.String(64), primary_key=True)
    # JSON-encoded value
    value = db.Column(db.Text, nullable=False)


class MenuItem(db.Model):
    __tablename__ = "menu_items"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    image_url = db.Column(db.String(500))
    price = db.Column(db.Numeric(10, 2), nullable=False)
    category = db.Column(db.String(60), nullable=False, default="")
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image_url": self.image_url,
            "price": float(self.price),
            "category": self.category,
            "is_active": self.is_active,
        }
