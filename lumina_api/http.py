import logging

from flask import jsonify, request
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError

from .errors import ApiError, BadRequestError, CapacityError, ValidationError
from .extensions import db

logger = logging.getLogger(__name__)


def jerror(status: int, code: str, message: str, details=None):
    payload = {"code": code, "message": message}
    if details:
        payload["details"] = details
    return jsonify(payload), status


def schema_errors(e: PydanticValidationError) -> list[dict]:
    return e.errors(include_url=False, include_context=False, include_input=False)


def load_body(model):
    """Validates the JSON request body against a pydantic ``model``."""
    payload = request.get_json(silent=True)
    if not payload or not isinstance(payload, dict):
        raise BadRequestError("Missing or invalid JSON payload.", code="INVALID_PAYLOAD")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError("Invalid input.", details=schema_errors(e))


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(err: ApiError):
        if isinstance(err, CapacityError):
            logger.info("Capacity conflict: %s", err.message)
        elif err.status >= 500:
            logger.error("%s: %s", err.code, err.message)
        return jerror(err.status, err.code, err.message, err.details)

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(err: SQLAlchemyError):
        logger.exception("Storage failure")
        db.session.rollback()
        return jerror(500, "STORAGE_ERROR", "Internal server error.")
