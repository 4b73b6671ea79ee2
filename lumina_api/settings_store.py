"""
Key/value settings persisted as JSON text, plus typed views of the two keys
the booking engine reads. Nothing is cached: every request sees the latest
admin write.
"""

import json
import logging

from pydantic import BaseModel, ValidationError as PydanticValidationError

from .extensions import db
from .models import Setting
from .schemas import DepositConfig, RestaurantHours

logger = logging.getLogger(__name__)

HOURS_KEY = "restaurant_hours"
DEPOSIT_KEY = "deposit_config"

_MISSING = object()


def _decode(raw: str):
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def get_setting(key: str, default=None):
    row = db.session.get(Setting, key)
    if row is None:
        return default
    return _decode(row.value)


def all_settings() -> dict:
    rows = db.session.execute(db.select(Setting).order_by(Setting.key)).scalars()
    return {row.key: _decode(row.value) for row in rows}


def put_settings(updates: dict) -> None:
    """Upserts every key; the caller commits."""
    for key, value in updates.items():
        encoded = value if isinstance(value, str) else json.dumps(value)
        row = db.session.get(Setting, key)
        if row is None:
            db.session.add(Setting(key=key, value=encoded))
        else:
            row.value = encoded
    db.session.flush()


def _typed(model: type[BaseModel], key: str, raw) -> BaseModel:
    # Each field is checked on its own so one bad value only resets that field.
    if not isinstance(raw, dict):
        logger.warning("Setting %s is not an object (%r); using defaults", key, raw)
        return model()

    values = {}
    for name in model.model_fields:
        value = raw.get(name)
        if value is None or value == "":
            continue
        try:
            model.model_validate({name: value})
        except PydanticValidationError:
            logger.warning("Ignoring unparsable %s.%s=%r", key, name, value)
            continue
        values[name] = value
    return model.model_validate(values)


def load_restaurant_hours() -> RestaurantHours | None:
    """Returns None when the hours were never configured."""
    raw = get_setting(HOURS_KEY, _MISSING)
    if raw is _MISSING:
        return None
    return _typed(RestaurantHours, HOURS_KEY, raw)


def load_deposit_config() -> DepositConfig:
    raw = get_setting(DEPOSIT_KEY, _MISSING)
    if raw is _MISSING:
        return DepositConfig()
    return _typed(DepositConfig, DEPOSIT_KEY, raw)
