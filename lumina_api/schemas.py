import datetime as dt
from datetime import time
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from .models import Location, ReservationStatus, TableStatus
from .utils.time import parse_hhmm


DEFAULT_OPEN = time(12, 0)
DEFAULT_CLOSE = time(22, 0)
DEFAULT_INTERVAL = 30
DEFAULT_DEPOSIT_THRESHOLD = 5
DEFAULT_DEPOSIT_AMOUNT = 50000


class RequestModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)


def _hhmm(v):
    if isinstance(v, time):
        return v
    return parse_hhmm(v)


class RestaurantHours(BaseModel):
    """Typed view of the ``restaurant_hours`` setting."""
    open: time = DEFAULT_OPEN
    close: time = DEFAULT_CLOSE
    interval: int = DEFAULT_INTERVAL

    @field_validator("open", "close", mode="before")
    @classmethod
    def parse_clock(cls, v):
        return _hhmm(v)

    def to_json(self) -> dict:
        return {
            "open": self.open.strftime("%H:%M"),
            "close": self.close.strftime("%H:%M"),
            "interval": self.interval,
        }


class DepositConfig(BaseModel):
    """Typed view of the ``deposit_config`` setting."""
    threshold: int = Field(DEFAULT_DEPOSIT_THRESHOLD, gt=0)
    amount: int = Field(DEFAULT_DEPOSIT_AMOUNT, gt=0)

    def requires_deposit(self, guest_count: int) -> bool:
        return guest_count >= self.threshold


class AvailabilityQuery(RequestModel):
    date: dt.date
    guests: int = Field(..., gt=0)
    location: Location | None = None

    @field_validator("location", mode="before")
    @classmethod
    def blank_location(cls, v):
        return v or None


class CreateReservationRequest(RequestModel):
    customer_name: str = Field(..., min_length=1, max_length=120)
    customer_email: EmailStr
    customer_phone: str = Field(..., min_length=1, max_length=32)
    date: dt.date
    time_slot: str = Field(..., pattern=r"^\d{2}:\d{2}$")
    guest_count: int = Field(..., gt=0)
    special_requests: str | None = Field(None, max_length=2000)
    seating_preference: Location | None = None

    @field_validator("time_slot")
    @classmethod
    def validate_time_slot(cls, v: str):
        parse_hhmm(v)
        return v


class UpdateReservationRequest(RequestModel):
    customer_name: str | None = Field(None, min_length=1, max_length=120)
    customer_email: EmailStr | None = None
    customer_phone: str | None = Field(None, min_length=1, max_length=32)
    date: dt.date | None = None
    time_slot: str | None = Field(None, pattern=r"^\d{2}:\d{2}$")
    guest_count: int | None = Field(None, gt=0)
    special_requests: str | None = Field(None, max_length=2000)
    seating_preference: Location | None = None
    status: ReservationStatus | None = None


class StatusUpdateRequest(RequestModel):
    status: ReservationStatus


class DepositUpdateRequest(RequestModel):
    deposit_paid: bool


class CreateTableRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=60)
    capacity: int = Field(..., gt=0)
    location: Location = Location.INDOOR
    type: str = Field("Standard", min_length=1, max_length=40)
    status: TableStatus = TableStatus.AVAILABLE
    is_joinable: bool = True


class UpdateTableRequest(RequestModel):
    name: str | None = Field(None, min_length=1, max_length=60)
    capacity: int | None = Field(None, gt=0)
    location: Location | None = None
    type: str | None = Field(None, min_length=1, max_length=40)
    status: TableStatus | None = None
    is_joinable: bool | None = None


class UpdateHoursRequest(RestaurantHours):
    """Admin write of ``restaurant_hours``: fields are required and must describe a real day."""
    open: time
    close: time
    interval: int = Field(DEFAULT_INTERVAL, gt=0)

    @model_validator(mode="after")
    def check_order(self):
        if self.open > self.close:
            raise ValueError("Opening time must not be after closing time.")
        return self


class MenuItemRequest(RequestModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str = ""
    image_url: str | None = Field(None, max_length=500)
    price: Decimal = Field(..., ge=0)
    category: str = ""
    is_active: bool = True


class LoginRequest(RequestModel):
    username: str
    password: str
