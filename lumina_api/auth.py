from functools import wraps
from flask import current_app, request

from .http import jerror


def _tokens() -> dict[str, str]:
    cfg = current_app.config
    return {cfg["ADMIN_TOKEN"]: "Admin", cfg["STAFF_TOKEN"]: "Staff"}


def login(username: str, password: str) -> tuple[str, str] | None:
    """
    Checks the fixed dashboard credentials and returns ``(token, role)``.
    """
    cfg = current_app.config
    if username == cfg["ADMIN_USERNAME"] and password == cfg["ADMIN_PASSWORD"]:
        return cfg["ADMIN_TOKEN"], "Admin"
    if username == cfg["STAFF_USERNAME"] and password == cfg["STAFF_PASSWORD"]:
        return cfg["STAFF_TOKEN"], "Staff"
    return None


def check_admin() -> bool:
    """
    Checks the Authorization header for a valid admin or staff bearer token.
    """
    auth_header = request.headers.get("Authorization", "").strip()
    if not auth_header.lower().startswith("bearer "):
        return False

    provided_token = auth_header[7:].strip()
    return bool(provided_token) and provided_token in _tokens()


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if not check_admin():
            return jerror(401, "UNAUTHORIZED", "Missing or invalid bearer token.")
        return view(*args, **kwargs)
    return wrapper
