"""
Error taxonomy shared by the engine, the services and the HTTP layer.

Every error carries the HTTP status and machine code it is rendered with,
so services raise and the app-level handlers in ``http.py`` do the rest.
"""


class ApiError(Exception):
    status = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details=None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details
        if code:
            self.code = code


class ValidationError(ApiError):
    status = 422
    code = "VALIDATION_ERROR"


class NotFoundError(ApiError):
    status = 404
    code = "NOT_FOUND"


class ConflictError(ApiError):
    status = 409
    code = "CONFLICT"


class CapacityError(ConflictError):
    """No single table or join can seat the party at the requested slot."""
    code = "FULLY_BOOKED"


class SlotConflictError(CapacityError):
    """A concurrent booking claimed the same table first; safe to retry."""
    code = "RACE_LOST"


class ConfigurationError(ApiError):
    code = "CONFIGURATION_ERROR"


class StorageError(ApiError):
    code = "STORAGE_ERROR"


class BadRequestError(ApiError):
    status = 400
    code = "BAD_REQUEST"
