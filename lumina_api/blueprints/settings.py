import logging
from flask import Blueprint, request, jsonify
from pydantic import ValidationError
from ..auth import admin_required
from ..extensions import db
from ..http import jerror, schema_errors
from ..schemas import DepositConfig, UpdateHoursRequest
from ..settings_store import DEPOSIT_KEY, HOURS_KEY, all_settings, put_settings

logger = logging.getLogger(__name__)

bp = Blueprint("settings", __name__)

# Keys the booking engine reads get checked before they are stored.
_VALIDATORS = {
    HOURS_KEY: lambda v: UpdateHoursRequest.model_validate(v).to_json(),
    DEPOSIT_KEY: lambda v: DepositConfig.model_validate(v).model_dump(),
}


@bp.get("/settings")
def get_settings():
    return jsonify(all_settings())


@bp.post("/admin/settings")
@admin_required
def update_settings():
    payload = request.get_json(silent=True)
    if not payload or not isinstance(payload, dict):
        return jerror(400, "INVALID_PAYLOAD", "Missing or invalid JSON payload.")

    updates = {}
    for key, value in payload.items():
        validate = _VALIDATORS.get(key)
        if validate is None:
            updates[key] = value
            continue
        try:
            updates[key] = validate(value)
        except ValidationError as e:
            return jerror(422, "INVALID_SETTING", f"Invalid value for '{key}'.", details=schema_errors(e))

    put_settings(updates)
    db.session.commit()
    logger.info("Settings updated: %s", ", ".join(sorted(updates)))
    return jsonify(message="Settings updated successfully")
